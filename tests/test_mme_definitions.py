import pytest

from dekotools.mme_definitions import (
    EXIT_BIT,
    IMMEDIATE_MASK,
    AluOperation,
    BranchCondition,
    Operation,
    ResultOperation,
    make_add_immediate,
    make_alu,
    make_branch,
    make_extract_insert,
    make_extract_shift_left_immediate,
    make_extract_shift_left_register,
    make_immediate,
    make_nop,
    make_nop_result,
    make_nop_source,
    make_read,
    make_result,
)


def _op(word):
    return word & 0x7


def _ra(word):
    return (word >> 11) & 0x7


def _rb(word):
    return (word >> 14) & 0x7


def _imm(word):
    raw = (word >> 14) & 0x3FFFF
    return raw - (1 << 18) if raw & (1 << 17) else raw


@pytest.mark.parametrize("value", [0, 1, -1, 5, -5, 0x1FFFF, -0x20000])
def test_immediate_round_trip(value):
    assert _imm(make_immediate(value)) == value


def test_immediate_stays_in_mask():
    for value in (-1, 0x3FFFF, 123456789):
        assert make_immediate(value) & ~IMMEDIATE_MASK == 0


def test_immediate_mask_covers_all_bits():
    assert IMMEDIATE_MASK >> 14 == 0x3FFFF
    assert make_immediate(-1) == IMMEDIATE_MASK


@pytest.mark.parametrize("op", list(AluOperation))
def test_alu_fields(op):
    word = make_alu(op, 3, 5)
    assert _op(word) == Operation.ALU
    assert _ra(word) == 3
    assert _rb(word) == 5
    assert (word >> 17) & 0x1F == op


def test_add_immediate_fields():
    word = make_add_immediate(6, -42)
    assert _op(word) == Operation.ADD_IMMEDIATE
    assert _ra(word) == 6
    assert _imm(word) == -42


def test_extract_insert_fields():
    word = make_extract_insert(7, 1, 9, 2, 4)
    assert _op(word) == Operation.EXTRACT_INSERT
    assert _ra(word) == 1
    assert _rb(word) == 2
    assert (word >> 17) & 0x1F == 9
    assert (word >> 22) & 0x1F == 4
    assert (word >> 27) & 0x1F == 7


def test_extract_shift_left_immediate_fields():
    word = make_extract_shift_left_immediate(31, 4, 3, 16)
    assert _op(word) == Operation.EXTRACT_SHIFT_LEFT_IMMEDIATE
    assert _ra(word) == 4
    assert _rb(word) == 3
    assert (word >> 22) & 0x1F == 16
    assert word >> 27 == 31
    assert word <= 0xFFFFFFFF


def test_extract_shift_left_register_fields():
    word = make_extract_shift_left_register(2, 11, 6, 8)
    assert _op(word) == Operation.EXTRACT_SHIFT_LEFT_REGISTER
    assert _ra(word) == 2
    assert _rb(word) == 6
    assert (word >> 17) & 0x1F == 11
    assert (word >> 22) & 0x1F == 8


def test_read_fields():
    word = make_read(5, 0x44)
    assert _op(word) == Operation.READ
    assert _ra(word) == 5
    assert _imm(word) == 0x44


@pytest.mark.parametrize("cond", list(BranchCondition))
def test_branch_fields(cond):
    word = make_branch(cond, 4)
    assert _op(word) == Operation.BRANCH
    assert (word >> 4) & 0x3 == cond
    assert _ra(word) == 4
    assert word & IMMEDIATE_MASK == 0


@pytest.mark.parametrize("op", list(ResultOperation))
def test_result_fields(op):
    word = make_result(op, 7)
    assert (word >> 4) & 0x7 == op
    assert (word >> 8) & 0x7 == 7
    assert word & 0x7 == 0


def test_nop_composition():
    assert make_nop_source() == make_add_immediate(0, 0)
    assert make_nop_result() == make_result(ResultOperation.MOVE, 0)
    assert make_nop() == make_nop_source() | make_nop_result()
    assert _op(make_nop()) == Operation.ADD_IMMEDIATE
    assert make_nop() & EXIT_BIT == 0