"""Instruction encodings for the Maxwell macro engine (MME).

Every encoder returns the 32-bit instruction word as an unsigned integer.
"""

from enum import IntEnum

_WORD_MASK = 0xFFFFFFFF


class Operation(IntEnum):
    """Source operation selected by the low bits of an instruction."""

    ALU = 0
    ADD_IMMEDIATE = 1
    EXTRACT_INSERT = 2
    EXTRACT_SHIFT_LEFT_IMMEDIATE = 3
    EXTRACT_SHIFT_LEFT_REGISTER = 4
    READ = 5
    BRANCH = 7


class AluOperation(IntEnum):
    """Operation performed by an ALU instruction."""

    ADD = 0
    ADD_WITH_CARRY = 1
    SUBTRACT = 2
    SUBTRACT_WITH_BORROW = 3
    XOR = 8
    OR = 9
    AND = 10
    AND_NOT = 11
    NAND = 12


class ResultOperation(IntEnum):
    """What an instruction does with its result."""

    IGNORE_AND_FETCH = 0
    MOVE = 1
    MOVE_AND_SET_METHOD = 2
    FETCH_AND_SEND = 3
    MOVE_AND_SEND = 4
    FETCH_AND_SET_METHOD = 5
    MOVE_AND_SET_METHOD_FETCH_AND_SEND = 6
    MOVE_AND_SET_METHOD_SEND = 7


class BranchCondition(IntEnum):
    """Condition tested by a branch instruction."""

    ZERO = 0
    NOT_ZERO = 1
    ZERO_ANNUL = 2
    NOT_ZERO_ANNUL = 3


def _word(value: int) -> int:
    return value & _WORD_MASK


def make_immediate(imm: int) -> int:
    """Place an 18-bit immediate into its instruction field."""
    return _word((imm & 0x3FFFF) << 14)


def make_alu(op: AluOperation, ra: int, rb: int) -> int:
    return _word(int(Operation.ALU) | (ra << 11) | (rb << 14) | (int(op) << 17))


def make_add_immediate(ra: int, imm: int) -> int:
    return _word(int(Operation.ADD_IMMEDIATE) | (ra << 11) | make_immediate(imm))


def make_extract_insert(ba: int, ra: int, bb: int, rb: int, size: int) -> int:
    return _word(
        int(Operation.EXTRACT_INSERT)
        | (ra << 11)
        | (rb << 14)
        | (bb << 17)
        | (size << 22)
        | (ba << 27)
    )


def make_extract_shift_left_immediate(ba: int, ra: int, rb: int, size: int) -> int:
    return _word(
        int(Operation.EXTRACT_SHIFT_LEFT_IMMEDIATE)
        | (ra << 11)
        | (rb << 14)
        | (size << 22)
        | (ba << 27)
    )


def make_extract_shift_left_register(ra: int, bb: int, rb: int, size: int) -> int:
    return _word(
        int(Operation.EXTRACT_SHIFT_LEFT_REGISTER)
        | (ra << 11)
        | (rb << 14)
        | (bb << 17)
        | (size << 22)
    )


def make_read(ra: int, imm: int) -> int:
    return _word(int(Operation.READ) | (ra << 11) | make_immediate(imm))


def make_branch(cond: BranchCondition, ra: int) -> int:
    return _word(int(Operation.BRANCH) | (int(cond) << 4) | (ra << 11))


def make_result(op: ResultOperation, rdst: int) -> int:
    return _word((int(op) << 4) | (rdst << 8))


def make_nop_source() -> int:
    return make_add_immediate(0, 0)


def make_nop_result() -> int:
    return make_result(ResultOperation.MOVE, 0)


def make_nop() -> int:
    return make_nop_source() | make_nop_result()


EXIT_BIT = 1 << 7
IMMEDIATE_MASK = make_immediate(0x3FFFF)