"""In-memory model of an Ember module and its big-endian byte layout.

Layout, in order::

    8-byte header placeholder
    u2 constant_pool_count (entries + 1), constant pool entries
    u2 access_flags, u2 this_class, u2 super_class
    u2 interfaces_count (0), u2 fields_count (0)
    u2 methods_count, methods
    u2 attributes_count (0)

The pool is append-only and 1-indexed. Nothing is deduplicated: interning
the same string twice yields two entries.
"""

import logging
import struct
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .exceptions import EncodingError

logger = logging.getLogger(__name__)

TAG_UTF8 = 0x01
TAG_CLASS = 0x07
TAG_METHODREF = 0x0A
TAG_NAME_AND_TYPE = 0x0C

HEADER = bytes(8)
CODE_ATTRIBUTE = "Code"

U2_MAX = 0xFFFF
U4_MAX = 0xFFFFFFFF


@dataclass(frozen=True)
class Utf8Info:
    value: str


@dataclass(frozen=True)
class ClassInfo:
    name_index: int


@dataclass(frozen=True)
class NameAndTypeInfo:
    name_index: int
    descriptor_index: int


@dataclass(frozen=True)
class MethodRefInfo:
    class_index: int
    name_and_type_index: int


Constant = Union[Utf8Info, ClassInfo, NameAndTypeInfo, MethodRefInfo]


def _u2(value: int, what: str) -> bytes:
    if not 0 <= value <= U2_MAX:
        raise EncodingError(f"{what} {value} does not fit in two bytes")
    return struct.pack(">H", value)


def _u4(value: int, what: str) -> bytes:
    if not 0 <= value <= U4_MAX:
        raise EncodingError(f"{what} {value} does not fit in four bytes")
    return struct.pack(">I", value)


class ConstantPool:
    def __init__(self):
        self.entries: List[Constant] = []

    def add(self, constant: Constant) -> int:
        # The count field stores len + 1, so the last usable index is 0xFFFE.
        if len(self.entries) + 1 >= U2_MAX:
            raise EncodingError("constant pool is full")
        self.entries.append(constant)
        return len(self.entries)

    def add_utf8(self, text: str) -> int:
        return self.add(Utf8Info(text))

    def add_class(self, name: str) -> int:
        return self.add(ClassInfo(self.add_utf8(name)))

    def add_name_and_type(self, name: str, descriptor: str) -> int:
        name_index = self.add_utf8(name)
        descriptor_index = self.add_utf8(descriptor)
        return self.add(NameAndTypeInfo(name_index, descriptor_index))

    def add_method_ref(self, owner: str, name: str, descriptor: str) -> int:
        name_and_type = self.add_name_and_type(name, descriptor)
        class_index = self.add_class(owner)
        return self.add(MethodRefInfo(class_index, name_and_type))

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, index: int) -> Constant:
        if index < 1 or index > len(self.entries):
            raise IndexError(f"constant pool index {index} out of range")
        return self.entries[index - 1]

    def encode(self) -> bytes:
        out = bytearray()
        for constant in self.entries:
            if isinstance(constant, Utf8Info):
                raw = constant.value.encode("utf-8")
                out.append(TAG_UTF8)
                out.extend(_u2(len(raw), "utf8 length"))
                out.extend(raw)
            elif isinstance(constant, ClassInfo):
                out.append(TAG_CLASS)
                out.extend(_u2(constant.name_index, "class name index"))
            elif isinstance(constant, NameAndTypeInfo):
                out.append(TAG_NAME_AND_TYPE)
                out.extend(_u2(constant.name_index, "name index"))
                out.extend(_u2(constant.descriptor_index, "descriptor index"))
            elif isinstance(constant, MethodRefInfo):
                out.append(TAG_METHODREF)
                out.extend(_u2(constant.class_index, "class index"))
                out.extend(_u2(constant.name_and_type_index, "name-and-type index"))
            else:
                raise EncodingError(f"unsupported constant {constant!r}")
        return bytes(out)


@dataclass(frozen=True)
class Attribute:
    name: str
    data: bytes


@dataclass
class Method:
    name: str
    descriptor: str
    attributes: List[Attribute] = field(default_factory=list)
    flags: int = 0


def code_attribute(code: bytes, max_locals: int) -> Attribute:
    """Code payload: u2 max_stack (0), u2 max_locals, u4 exception table (0), code."""
    data = bytearray()
    data.extend(_u2(0, "max stack"))
    data.extend(_u2(max_locals, "max locals"))
    data.extend(_u4(0, "exception table"))
    data.extend(code)
    return Attribute(CODE_ATTRIBUTE, bytes(data))


class ClassModule:
    """One module under construction.

    Generation appends methods and call-site references; ``to_bytes`` then
    interns the remaining names and writes the layout exactly once.
    """

    def __init__(self, name: str, super_name: str = "base/Object"):
        self.name = name
        self.super_name = super_name
        self.flags = 0
        self.pool = ConstantPool()
        self.methods: List[Method] = []
        self._encoded: Optional[bytes] = None

    @property
    def sealed(self) -> bool:
        return self._encoded is not None

    def add_method(self, name: str, descriptor: str, code: bytes, max_locals: int) -> Method:
        self._check_open()
        method = Method(name, descriptor, [code_attribute(code, max_locals)])
        self.methods.append(method)
        return method

    def add_method_ref(self, name: str, descriptor: str) -> int:
        self._check_open()
        return self.pool.add_method_ref(self.name, name, descriptor)

    def to_bytes(self) -> bytes:
        if self._encoded is None:
            mark = len(self.pool)
            try:
                self._encoded = self._encode()
            except EncodingError:
                # Drop the names interned by the failed attempt.
                del self.pool.entries[mark:]
                raise
            logger.debug(
                "encoded module %s: %d bytes, %d constants, %d methods",
                self.name,
                len(self._encoded),
                len(self.pool),
                len(self.methods),
            )
        return self._encoded

    def _check_open(self) -> None:
        if self._encoded is not None:
            raise EncodingError(f"module {self.name} has already been serialized")

    def _encode(self) -> bytes:
        # Intern every remaining name before the pool itself is written.
        this_index = self.pool.add_utf8(self.name)
        super_index = self.pool.add_utf8(self.super_name)
        method_entries = [self._link_method(m) for m in self.methods]

        body = bytearray()
        body.extend(_u2(self.flags, "access flags"))
        body.extend(_u2(this_index, "this class index"))
        body.extend(_u2(super_index, "super class index"))
        body.extend(_u2(0, "interfaces count"))
        body.extend(_u2(0, "fields count"))
        body.extend(_u2(len(self.methods), "methods count"))
        for entry in method_entries:
            body.extend(entry)
        body.extend(_u2(0, "attributes count"))

        out = bytearray(HEADER)
        out.extend(_u2(len(self.pool) + 1, "constant pool count"))
        out.extend(self.pool.encode())
        out.extend(body)
        return bytes(out)

    def _link_method(self, method: Method) -> bytes:
        entry = bytearray()
        entry.extend(_u2(method.flags, "method flags"))
        entry.extend(_u2(self.pool.add_utf8(method.name), "method name index"))
        entry.extend(_u2(self.pool.add_utf8(method.descriptor), "method descriptor index"))
        entry.extend(_u2(len(method.attributes), "attribute count"))
        for attribute in method.attributes:
            entry.extend(_u2(self.pool.add_utf8(attribute.name), "attribute name index"))
            entry.extend(_u4(len(attribute.data), "attribute length"))
            entry.extend(attribute.data)
        return bytes(entry)
