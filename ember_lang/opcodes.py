ICONST_M1 = 0x02
ICONST_0 = 0x03
ICONST_1 = 0x04
ICONST_2 = 0x05
ICONST_3 = 0x06
ICONST_4 = 0x07
ICONST_5 = 0x08

ILOAD = 0x15
ILOAD_0 = 0x1A
ILOAD_1 = 0x1B
ILOAD_2 = 0x1C
ILOAD_3 = 0x1D

ISTORE = 0x36
ISTORE_0 = 0x3B
ISTORE_1 = 0x3C
ISTORE_2 = 0x3D
ISTORE_3 = 0x3E

IADD = 0x60
ISUB = 0x64
IMUL = 0x68
IDIV = 0x6C
INEG = 0x74

IRETURN = 0xAC
INVOKEVIRTUAL = 0xB6

ICONSTS = {
    -1: ICONST_M1,
    0: ICONST_0,
    1: ICONST_1,
    2: ICONST_2,
    3: ICONST_3,
    4: ICONST_4,
    5: ICONST_5,
}

ILOADS = {0: ILOAD_0, 1: ILOAD_1, 2: ILOAD_2, 3: ILOAD_3}
ISTORES = {0: ISTORE_0, 1: ISTORE_1, 2: ISTORE_2, 3: ISTORE_3}

# Largest slot a generic load/store can address with its one-byte operand.
MAX_SLOT_OPERAND = 0xFF

# name, number of operand bytes
OPCODE_INFO = {
    ICONST_M1: ("iconst_m1", 0),
    ICONST_0: ("iconst_0", 0),
    ICONST_1: ("iconst_1", 0),
    ICONST_2: ("iconst_2", 0),
    ICONST_3: ("iconst_3", 0),
    ICONST_4: ("iconst_4", 0),
    ICONST_5: ("iconst_5", 0),
    ILOAD: ("iload", 1),
    ILOAD_0: ("iload_0", 0),
    ILOAD_1: ("iload_1", 0),
    ILOAD_2: ("iload_2", 0),
    ILOAD_3: ("iload_3", 0),
    ISTORE: ("istore", 1),
    ISTORE_0: ("istore_0", 0),
    ISTORE_1: ("istore_1", 0),
    ISTORE_2: ("istore_2", 0),
    ISTORE_3: ("istore_3", 0),
    IADD: ("iadd", 0),
    ISUB: ("isub", 0),
    IMUL: ("imul", 0),
    IDIV: ("idiv", 0),
    INEG: ("ineg", 0),
    IRETURN: ("ireturn", 0),
    INVOKEVIRTUAL: ("invokevirtual", 2),
}
