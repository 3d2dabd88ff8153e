import unittest

from ember_lang import ClassModule, ConstantPool, EncodingError
from ember_lang import opcodes as op
from ember_lang.classfile import (
    ClassInfo,
    MethodRefInfo,
    NameAndTypeInfo,
    Utf8Info,
    code_attribute,
)


class ConstantPoolTests(unittest.TestCase):
    def test_indices_start_at_one(self) -> None:
        pool = ConstantPool()
        self.assertEqual(pool.add_utf8("a"), 1)
        self.assertEqual(pool.add_utf8("b"), 2)
        self.assertEqual(pool[1], Utf8Info("a"))
        self.assertEqual(len(pool), 2)

    def test_out_of_range_index(self) -> None:
        pool = ConstantPool()
        pool.add_utf8("a")
        with self.assertRaises(IndexError):
            pool[0]
        with self.assertRaises(IndexError):
            pool[2]

    def test_no_deduplication(self) -> None:
        pool = ConstantPool()
        first = pool.add_utf8("same")
        second = pool.add_utf8("same")
        self.assertNotEqual(first, second)
        self.assertEqual(len(pool), 2)

    def test_method_ref_entry_order(self) -> None:
        pool = ConstantPool()
        index = pool.add_method_ref("Owner", "f", "()V")
        self.assertEqual(index, 6)
        self.assertEqual(
            pool.entries,
            [
                Utf8Info("f"),
                Utf8Info("()V"),
                NameAndTypeInfo(1, 2),
                Utf8Info("Owner"),
                ClassInfo(4),
                MethodRefInfo(5, 3),
            ],
        )

    def test_encoding(self) -> None:
        pool = ConstantPool()
        pool.add_method_ref("O", "f", "()V")
        self.assertEqual(
            pool.encode(),
            b"\x01\x00\x01f"
            + b"\x01\x00\x03()V"
            + b"\x0c\x00\x01\x00\x02"
            + b"\x01\x00\x01O"
            + b"\x07\x00\x04"
            + b"\x0a\x00\x05\x00\x03",
        )

    def test_utf8_length_counts_bytes(self) -> None:
        pool = ConstantPool()
        pool.add_utf8("é")
        self.assertEqual(pool.encode(), b"\x01\x00\x02\xc3\xa9")

    def test_pool_full(self) -> None:
        pool = ConstantPool()
        pool.entries = [Utf8Info("x")] * 0xFFFD
        self.assertEqual(pool.add_utf8("last"), 0xFFFE)
        with self.assertRaises(EncodingError):
            pool.add_utf8("overflow")


class CodeAttributeTests(unittest.TestCase):
    def test_payload_layout(self) -> None:
        attribute = code_attribute(bytes([op.ICONST_1, op.IRETURN]), 3)
        self.assertEqual(attribute.name, "Code")
        self.assertEqual(attribute.data, b"\x00\x00\x00\x03\x00\x00\x00\x00\x04\xac")

    def test_max_locals_overflow(self) -> None:
        with self.assertRaises(EncodingError):
            code_attribute(b"", 0x10000)


class ClassModuleTests(unittest.TestCase):
    def test_empty_module_bytes(self) -> None:
        data = ClassModule("A", "B").to_bytes()
        self.assertEqual(
            data,
            bytes(8)
            + b"\x00\x03"
            + b"\x01\x00\x01A"
            + b"\x01\x00\x01B"
            + b"\x00\x00"  # flags
            + b"\x00\x01"  # this
            + b"\x00\x02"  # super
            + b"\x00\x00\x00\x00"  # interfaces, fields
            + b"\x00\x00"  # methods
            + b"\x00\x00",  # attributes
        )

    def test_default_super_class(self) -> None:
        module = ClassModule("A")
        module.to_bytes()
        self.assertEqual(module.pool[2], Utf8Info("base/Object"))

    def test_single_method_layout(self) -> None:
        module = ClassModule("A", "B")
        module.add_method("f", "()I", bytes([op.ICONST_1, op.IRETURN]), 0)
        data = module.to_bytes()
        self.assertEqual(
            [module.pool[i] for i in range(1, 6)],
            [Utf8Info("A"), Utf8Info("B"), Utf8Info("f"), Utf8Info("()I"), Utf8Info("Code")],
        )
        method = (
            b"\x00\x00"  # flags
            + b"\x00\x03\x00\x04"  # name, descriptor
            + b"\x00\x01"  # attribute count
            + b"\x00\x05"  # "Code"
            + b"\x00\x00\x00\x0a"
            + b"\x00\x00\x00\x00\x00\x00\x00\x00\x04\xac"
        )
        self.assertEqual(data[8:10], b"\x00\x06")
        self.assertTrue(data.endswith(b"\x00\x01" + method + b"\x00\x00"))

    def test_to_bytes_is_idempotent(self) -> None:
        module = ClassModule("A")
        module.add_method("f", "()V", b"", 0)
        first = module.to_bytes()
        pool_size = len(module.pool)
        self.assertIs(module.to_bytes(), first)
        self.assertEqual(len(module.pool), pool_size)
        self.assertTrue(module.sealed)

    def test_sealed_module_rejects_changes(self) -> None:
        module = ClassModule("A")
        module.to_bytes()
        with self.assertRaises(EncodingError):
            module.add_method("f", "()V", b"", 0)
        with self.assertRaises(EncodingError):
            module.add_method_ref("f", "()V")

    def test_failed_encode_leaves_module_open(self) -> None:
        module = ClassModule("A")
        module.add_method("x" * 0x10000, "()V", b"", 0)
        with self.assertRaises(EncodingError):
            module.to_bytes()
        self.assertEqual(len(module.pool), 0)
        self.assertFalse(module.sealed)
        with self.assertRaises(EncodingError):
            module.to_bytes()
        self.assertEqual(len(module.pool), 0)

    def test_method_ref_owner_is_module(self) -> None:
        module = ClassModule("Prog")
        index = module.add_method_ref("f", "()V")
        ref = module.pool[index]
        self.assertEqual(module.pool[module.pool[ref.class_index].name_index], Utf8Info("Prog"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main(verbosity=2)
