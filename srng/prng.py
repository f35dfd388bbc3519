# Stable 16-bit PRNG over a single 64-bit register (not for cryptographic use)
# Layers: byte engine -> halfword whitening -> optional reseed -> range reduction
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from . import byte_engine
from .models import ByteWidth
from .steps import (
    MASK16,
    MASK64,
    SEED_LCG_FIRST_ADDEND,
    SEED_LCG_SECOND_ADDEND,
    halfword_lcg,
    rotate_left16,
    whiten_seed,
)
from .views import PACKED_VIEW, RegisterView

logger = logging.getLogger(__name__)

# 64-bit fractional parts of pi, e and the golden ratio. Each one is a register
# where the halfword stream would settle on a shortened cycle; hitting one moves
# the register to the next.
CYCLE_TRIGGERS = (
    0x243F6A8885A308D3,
    0xB7E151628AED2A6A,
    0x9E3779B97F4A7C15,
)
_TRIGGER_SUCCESSOR = {
    value: CYCLE_TRIGGERS[(index + 1) % len(CYCLE_TRIGGERS)]
    for index, value in enumerate(CYCLE_TRIGGERS)
}

MAX_LIMIT = 0xFFFF


def _check_limit(limit: int) -> None:
    if not 0 <= limit <= MAX_LIMIT:
        raise ValueError(f"limit must be within 0..{MAX_LIMIT}, received {limit}.")


@dataclass
class StableRandom:
    state: int = 0
    view: RegisterView = field(default=PACKED_VIEW, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.state &= MASK64

    def next_byte(self) -> int:
        sub = self.view.load(self.state)
        value = byte_engine.next_byte(sub)
        self.state = self.view.store(sub)
        return value

    def next_bytes(self, width: ByteWidth) -> int:
        """Concatenate *width* bytes big-endian; the first byte drawn is the most significant."""
        result = 0
        for _ in range(width):
            result = (result << 8) | self.next_byte()
        return result

    def next_halfword(self) -> int:
        successor = _TRIGGER_SUCCESSOR.get(self.state)
        if successor is not None:
            logger.debug("register 0x%016x is a cycle trigger; moving to 0x%016x", self.state, successor)
            self.state = successor

        buffer = self.next_bytes(2)
        control = self.next_byte()
        rotation = control >> 4
        multiplier = 3 + ((control & 12) >> 1)
        for _ in range((control & 3) + 2):
            buffer = halfword_lcg(buffer)
        if rotation:
            buffer = rotate_left16(buffer, rotation)
        return (buffer * multiplier) & MASK16

    def derive_seed(self) -> int:
        """Replace the register wholesale with a freshly derived one and return it."""
        first = whiten_seed(self.next_bytes(8), SEED_LCG_FIRST_ADDEND)
        second = 0
        for _ in range(4):
            second = (second << 16) | self.next_halfword()
        second = whiten_seed(second, SEED_LCG_SECOND_ADDEND)
        self.state = first ^ second
        return self.state

    def reseed(self, count: int = 1) -> int:
        if count < 0:
            raise ValueError(f"reseed count must be non-negative, received {count}.")
        for _ in range(count):
            self.derive_seed()
        return self.state

    def randrange(self, limit: int) -> int:
        """Uniform value in ``[0, limit)``; ``0`` means the full 16-bit range.

        ``limit == 1`` returns 0 without consuming any entropy. Other limits that
        are not powers of two are rejection-sampled against ``65536 % limit`` so
        the reduction carries no modulo bias.
        """
        _check_limit(limit)
        return self._reduce(limit)

    def _reduce(self, limit: int) -> int:
        if limit == 1:
            return 0
        result = self.next_halfword()
        if not limit & (limit - 1):
            return result & ((limit - 1) & MASK16)
        if result >= limit:
            return result % limit
        bias = 0x10000 % limit
        while result < bias:
            result = self.next_halfword()
        return result % limit

    def draw(self, limit: int = 0, reseed: int = 0) -> int:
        _check_limit(limit)
        self.reseed(reseed)
        return self._reduce(limit)

    def random(self) -> float:
        return self.next_halfword() / 0x10000

    def randint(self, a: int, b: int) -> int:
        # inclusive a..b
        span = b - a + 1
        if not 0 < span <= 0x10000:
            raise ValueError(f"randint span must hold 1..65536 values, received {a}..{b}.")
        return a + self.randrange(span & MASK16)

    def draws(self, count: int, limit: int = 0) -> np.ndarray:
        out = np.empty(count, dtype=np.uint16)
        for index in range(count):
            out[index] = self.randrange(limit)
        return out

    def copy(self) -> "StableRandom":
        return StableRandom(self.state, view=self.view)

    def spawn(self, count: int) -> List["StableRandom"]:
        """Derive *count* independent streams by successive reseeds of this register."""
        if count < 0:
            raise ValueError(f"stream count must be non-negative, received {count}.")
        return [StableRandom(self.derive_seed(), view=self.view) for _ in range(count)]


def draw(register: Optional[StableRandom], limit: int = 0, reseed: int = 0) -> int:
    """Reseed *register* ``reseed`` times, then return one value in ``[0, limit)``.

    A missing register is the only failure case and yields 0.
    """
    if register is None:
        return 0
    return register.draw(limit, reseed)
