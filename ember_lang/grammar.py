EMBER_TOKENS = r"""
    start: token*

    ?token: RETURN | LET | FUN
          | NAME | NUMBER
          | POW | STAR | SLASH | PLUS | MINUS
          | ASSIGN | SEMICOLON | COMMA
          | LPAR | RPAR | LBRACE | RBRACE

    // Keywords are reclassified from NAME matches by the lexer.
    RETURN: "return"
    LET: "let"
    FUN: "fun"

    NAME: /[^\W\d_][^\W_]*/
    NUMBER: /[0-9]+/

    POW: "**"
    STAR: "*"
    SLASH: "/"
    PLUS: "+"
    MINUS: "-"
    ASSIGN: "="
    SEMICOLON: ";"
    COMMA: ","
    LPAR: "("
    RPAR: ")"
    LBRACE: "{"
    RBRACE: "}"

    WS: /\s+/
    %ignore WS
"""
