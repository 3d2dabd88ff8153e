"""Ember entrypoint module exposing the public API and CLI."""

import argparse
import logging
import os
import sys

from ember_lang import (
    EMBER_TOKENS,
    CompilerOptions,
    Diagnostic,
    EmberCompiler,
    EmberError,
    Failure,
    Success,
    compile_source,
    disassemble,
)

__all__ = [
    "EMBER_TOKENS",
    "CompilerOptions",
    "Diagnostic",
    "EmberCompiler",
    "EmberError",
    "Failure",
    "Success",
    "compile_source",
    "disassemble",
    "main",
]


def _default_out_path(source_path: str) -> str:
    stem, _ = os.path.splitext(source_path)
    return stem + ".class"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Ember compiler")
    parser.add_argument("source", help="Path to the .em source file")
    parser.add_argument("-o", "--out", default=None, help="Output module path (default: <source>.class)")
    parser.add_argument("--class-name", default=None, help="Name recorded as this class (default: source file stem)")
    parser.add_argument("--super-class", default=None, help="Name recorded as the super class")
    parser.add_argument(
        "--disassemble", action="store_true", help="Print a listing of the emitted module"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log compiler stages")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    options = CompilerOptions.from_env()
    if args.class_name:
        options.class_name = args.class_name
    elif "EMBER_CLASS_NAME" not in os.environ:
        options.class_name = os.path.splitext(os.path.basename(args.source))[0]
    if args.super_class:
        options.super_class = args.super_class

    try:
        with open(args.source, "r", encoding="utf-8") as f:
            source = f.read()
    except OSError as e:
        print(f"error: could not open file ({e})", file=sys.stderr)
        sys.exit(1)

    result = compile_source(source, options)
    if isinstance(result, Failure):
        print(f"error: {result.diagnostic}", file=sys.stderr)
        sys.exit(1)

    out_path = args.out or _default_out_path(args.source)
    try:
        with open(out_path, "wb") as f:
            f.write(result.output)
    except OSError as e:
        print(f"error: could not write {out_path} ({e})", file=sys.stderr)
        sys.exit(1)

    if args.disassemble:
        for line in disassemble(result.output):
            print(line)
    print(f"wrote {len(result.output)} bytes to {out_path}")
    return 0


if __name__ == "__main__":
    main()
