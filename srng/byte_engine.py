"""Core 8-bit generator over the five-field sub-state.

The base generator is a lag-2 multiply-with-carry in base 256 with multiplier
210. Its triple ``(prev, current, carry)`` corresponds to
``z = prev + 256*current + 65536*carry`` modulo ``210*256**2 - 1``, which
factors as ``29 * 474571``. Every step multiplies ``z`` by the inverse of 256,
so the multiples of 474571 fall on four cycles of length 7 (256 has order 7
modulo 29). Those cycles, and the two absorbing states, are what the escapes
below steer around.
"""

import logging

from .models import SubState
from .steps import MASK8, MASK32, generator_step, linear_step, xorshift_scramble

logger = logging.getLogger(__name__)

GENERATOR_MODULUS = 210
ABSORBING_SUMS = (0, 719)

# Carry values a (0, 0, carry) generator is moved to while it sits at its start
# state. All are coprime to 29, so each lands on a full-length cycle.
START_CARRIES = (0x35, 0x5B, 0x83, 0xA7, 0x1F, 0x6D, 0xC1, 0x49)

# Triples used once the start table is exhausted.
RESTART_TRIPLES = ((0x5A, 0xC3, 0x71),)

# One entry point per 7-state cycle; each maps to the next, and the last one
# leaves the short cycles for the restart triple on a full-length cycle.
SHORT_CYCLE_SPLICES = (
    (203, 61, 7),
    (150, 123, 14),
    (44, 247, 28),
    (88, 238, 57),
)
_SPLICE_SUCCESSOR = dict(zip(SHORT_CYCLE_SPLICES, SHORT_CYCLE_SPLICES[1:] + RESTART_TRIPLES[:1]))


def _next_linear(state: SubState) -> int:
    state.linear = linear_step(state.linear)
    return state.linear


def _refill_shift(state: SubState) -> None:
    shift = 0
    for _ in range(4):
        shift = ((shift << 8) | _next_linear(state)) & MASK32
    state.shift = shift


def _escape_short_cycles(state: SubState) -> None:
    if not state.prev and not state.current:
        if state.carry < len(START_CARRIES):
            state.carry = START_CARRIES[state.carry]
        else:
            logger.debug("start table exhausted at carry %d; restarting generator", state.carry)
            state.triple = RESTART_TRIPLES[0]
            _next_linear(state)
        return

    successor = _SPLICE_SUCCESSOR.get(state.triple)
    if successor is not None:
        logger.debug("splicing short cycle %s -> %s", state.triple, successor)
        state.triple = successor


def _combine(shift: int, current: int, linear: int) -> int:
    p = (shift >> ((linear >> 3) & 24)) & MASK8
    operator = (linear >> 4) & 3
    if operator == 0:
        value = p + current
    elif operator == 1:
        value = p ^ current
    elif operator == 2:
        value = p - current
    else:
        value = current - p
    return value & MASK8


def next_byte(state: SubState) -> int:
    """Advance *state* in place and return one 8-bit output."""

    if not state.shift:
        _refill_shift(state)
    state.shift = xorshift_scramble(state.shift)

    _escape_short_cycles(state)

    if state.carry >= GENERATOR_MODULUS:
        state.carry -= GENERATOR_MODULUS

    if state.prev + state.current + state.carry in ABSORBING_SUMS:
        logger.debug("generator reached fixed point %s; reseeding from counter", state.triple)
        state.prev = _next_linear(state)
        state.carry = _next_linear(state)
        state.current = _next_linear(state)

    state.triple = generator_step(state.prev, state.current, state.carry)
    _next_linear(state)
    return _combine(state.shift, state.current, state.linear)
