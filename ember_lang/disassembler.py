import struct
import sys
from dataclasses import dataclass, field
from typing import List

from . import opcodes as op
from .classfile import (
    CODE_ATTRIBUTE,
    HEADER,
    TAG_CLASS,
    TAG_METHODREF,
    TAG_NAME_AND_TYPE,
    TAG_UTF8,
    ClassInfo,
    Constant,
    MethodRefInfo,
    NameAndTypeInfo,
    Utf8Info,
)
from .exceptions import EncodingError


@dataclass
class MethodDump:
    name: str
    descriptor: str
    flags: int = 0
    max_locals: int = 0
    code: bytes = b""


@dataclass
class ModuleDump:
    constants: List[Constant] = field(default_factory=list)
    flags: int = 0
    this_class: str = ""
    super_class: str = ""
    methods: List[MethodDump] = field(default_factory=list)

    def constant(self, index: int) -> Constant:
        if index < 1 or index > len(self.constants):
            raise EncodingError(f"constant pool index {index} out of range")
        return self.constants[index - 1]

    def utf8(self, index: int) -> str:
        constant = self.constant(index)
        if not isinstance(constant, Utf8Info):
            raise EncodingError(f"constant #{index} is not a Utf8 entry")
        return constant.value


class _Reader:
    def __init__(self, data: bytes):
        self.data = data
        self.pc = 0

    def take(self, n: int) -> bytes:
        if self.pc + n > len(self.data):
            raise EncodingError(f"truncated module: wanted {n} bytes at offset {self.pc}")
        chunk = self.data[self.pc:self.pc + n]
        self.pc += n
        return chunk

    def u1(self) -> int:
        return self.take(1)[0]

    def u2(self) -> int:
        return struct.unpack(">H", self.take(2))[0]

    def u4(self) -> int:
        return struct.unpack(">I", self.take(4))[0]


def read_module(data: bytes) -> ModuleDump:
    reader = _Reader(bytes(data))
    if reader.take(len(HEADER)) != HEADER:
        raise EncodingError("unexpected module header")

    dump = ModuleDump()
    pool_count = reader.u2()
    for _ in range(pool_count - 1):
        tag = reader.u1()
        if tag == TAG_UTF8:
            length = reader.u2()
            dump.constants.append(Utf8Info(reader.take(length).decode("utf-8")))
        elif tag == TAG_CLASS:
            dump.constants.append(ClassInfo(reader.u2()))
        elif tag == TAG_NAME_AND_TYPE:
            dump.constants.append(NameAndTypeInfo(reader.u2(), reader.u2()))
        elif tag == TAG_METHODREF:
            dump.constants.append(MethodRefInfo(reader.u2(), reader.u2()))
        else:
            raise EncodingError(f"unknown constant tag 0x{tag:02X}")

    dump.flags = reader.u2()
    dump.this_class = dump.utf8(reader.u2())
    dump.super_class = dump.utf8(reader.u2())
    if reader.u2() != 0 or reader.u2() != 0:
        raise EncodingError("interfaces and fields are not supported")

    for _ in range(reader.u2()):
        flags = reader.u2()
        method = MethodDump(dump.utf8(reader.u2()), dump.utf8(reader.u2()), flags)
        for _ in range(reader.u2()):
            name = dump.utf8(reader.u2())
            payload = reader.take(reader.u4())
            if name == CODE_ATTRIBUTE:
                if len(payload) < 8:
                    raise EncodingError(f"code attribute of {method.name} is truncated")
                _, method.max_locals, _ = struct.unpack(">HHI", payload[:8])
                method.code = payload[8:]
        dump.methods.append(method)

    reader.u2()  # module attributes, always empty
    if reader.pc != len(reader.data):
        raise EncodingError(f"{len(reader.data) - reader.pc} trailing bytes after module")
    return dump


def describe_constant(dump: ModuleDump, constant: Constant) -> str:
    if isinstance(constant, Utf8Info):
        return f"Utf8 {constant.value!r}"
    if isinstance(constant, ClassInfo):
        return f"Class #{constant.name_index} ({dump.utf8(constant.name_index)})"
    if isinstance(constant, NameAndTypeInfo):
        return (
            f"NameAndType #{constant.name_index}:#{constant.descriptor_index} "
            f"({dump.utf8(constant.name_index)}{dump.utf8(constant.descriptor_index)})"
        )
    if isinstance(constant, MethodRefInfo):
        return f"Methodref #{constant.class_index}.#{constant.name_and_type_index}"
    return repr(constant)


def disassemble_code(dump: ModuleDump, code: bytes) -> List[str]:
    lines = []
    pc = 0
    while pc < len(code):
        opcode = code[pc]
        info = op.OPCODE_INFO.get(opcode)
        if info is None:
            lines.append(f"{pc:04x}: unknown 0x{opcode:02x}")
            pc += 1
            continue
        name, width = info
        operand = code[pc + 1:pc + 1 + width]
        if len(operand) != width:
            raise EncodingError(f"truncated {name} at offset {pc}")
        if opcode == op.INVOKEVIRTUAL:
            index = struct.unpack(">H", operand)[0]
            lines.append(f"{pc:04x}: {name} #{index} // {_method_ref_name(dump, index)}")
        elif width:
            lines.append(f"{pc:04x}: {name} {operand[0]}")
        else:
            lines.append(f"{pc:04x}: {name}")
        pc += 1 + width
    return lines


def _method_ref_name(dump: ModuleDump, index: int) -> str:
    ref = dump.constant(index)
    if not isinstance(ref, MethodRefInfo):
        raise EncodingError(f"constant #{index} is not a Methodref")
    name_and_type = dump.constant(ref.name_and_type_index)
    if not isinstance(name_and_type, NameAndTypeInfo):
        raise EncodingError(f"constant #{ref.name_and_type_index} is not a NameAndType")
    return dump.utf8(name_and_type.name_index)


def disassemble(data: bytes) -> List[str]:
    dump = read_module(data)
    lines = [f"Module: {dump.this_class} extends {dump.super_class}"]
    lines.append(f"Constant Pool ({len(dump.constants)} items):")
    for index, constant in enumerate(dump.constants, start=1):
        lines.append(f"  #{index}: {describe_constant(dump, constant)}")
    for method in dump.methods:
        lines.append(
            f"Method {method.name} {method.descriptor} "
            f"(max_locals={method.max_locals}, {len(method.code)} bytes):"
        )
        lines.extend(f"  {line}" for line in disassemble_code(dump, method.code))
    return lines


def main(argv=None) -> int:  # pragma: no cover
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print("usage: python -m ember_lang.disassembler MODULE")
        return 2
    with open(args[0], "rb") as f:
        data = f.read()
    for line in disassemble(data):
        print(line)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
