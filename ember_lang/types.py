from .exceptions import SemanticError
from .symbols import INT, VOID, FunctionSignature


class TypeCanon:
    VALUE = {INT}
    RETURN = {INT, VOID}
    DESCRIPTOR_CODES = {INT: "I", VOID: "V"}

    @classmethod
    def require_value_type(cls, type_name: str) -> str:
        if type_name not in cls.VALUE:
            raise SemanticError(f"unknown type '{type_name}'")
        return type_name

    @classmethod
    def require_return_type(cls, type_name: str) -> str:
        if type_name not in cls.RETURN:
            raise SemanticError(f"unknown return type '{type_name}'")
        return type_name

    @classmethod
    def are_compatible(cls, declared: str, actual: str) -> bool:
        return declared == actual and declared in cls.VALUE

    @classmethod
    def descriptor(cls, signature: FunctionSignature) -> str:
        args = "".join(cls._code(a.type_name) for a in signature.arguments)
        return f"({args}){cls._code(signature.return_type)}"

    @classmethod
    def _code(cls, type_name: str) -> str:
        code = cls.DESCRIPTOR_CODES.get(type_name)
        if code is None:
            raise SemanticError(f"type '{type_name}' has no descriptor encoding")
        return code
