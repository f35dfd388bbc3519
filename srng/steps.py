"""Pure arithmetic recurrences shared by the byte, halfword and seed engines."""

MASK8 = 0xFF
MASK16 = 0xFFFF
MASK32 = 0xFFFFFFFF
MASK64 = 0xFFFFFFFFFFFFFFFF

LINEAR_MULTIPLIER = 73
LINEAR_ADDEND = 29
GENERATOR_BASE = 210
HALFWORD_LCG_MULTIPLIER = 0x6329
HALFWORD_LCG_ADDEND = 0x4321
SEED_LCG_MULTIPLIER = 0x5851F42D4C957F2D
SEED_LCG_FIRST_ADDEND = 0x0123456789ABCDEF
SEED_LCG_SECOND_ADDEND = 0x0FEDCBA987654321


def linear_step(linear: int) -> int:
    """Full-period 8-bit counter: multiplier is 1 mod 4 and the addend is odd."""
    return (linear * LINEAR_MULTIPLIER + LINEAR_ADDEND) & MASK8


def xorshift_scramble(shift: int) -> int:
    """32-bit xorshift triple (8, 9, 23) backing the long period."""
    shift ^= shift >> 8
    shift ^= (shift << 9) & MASK32
    shift ^= shift >> 23
    return shift


def generator_step(prev: int, current: int, carry: int) -> tuple[int, int, int]:
    """One lag-2 multiply-with-carry step in base 256 with multiplier 210.

    Returns the new ``(prev, current, carry)`` triple.
    """
    value = GENERATOR_BASE * prev + carry
    return current, value & MASK8, value >> 8


def halfword_lcg(value: int) -> int:
    return (value * HALFWORD_LCG_MULTIPLIER + HALFWORD_LCG_ADDEND) & MASK16


def rotate_left16(value: int, amount: int) -> int:
    amount &= 15
    if not amount:
        return value
    return ((value << amount) | (value >> (16 - amount))) & MASK16


def whiten_seed(value: int, addend: int) -> int:
    """64-bit LCG step used to whiten both halves of a derived seed."""
    return (value * SEED_LCG_MULTIPLIER + addend) & MASK64
