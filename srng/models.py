
from dataclasses import dataclass
from typing import Literal, Tuple

# Bit offsets of the sub-state fields inside the 64-bit register.
SHIFT_OFFSET = 0
CARRY_OFFSET = 32
CURRENT_OFFSET = 40
PREV_OFFSET = 48
LINEAR_OFFSET = 56

ByteWidth = Literal[0, 1, 2, 3, 4, 5, 6, 7, 8]


@dataclass
class SubState:
    shift: int = 0
    carry: int = 0
    current: int = 0
    prev: int = 0
    linear: int = 0

    @property
    def triple(self) -> Tuple[int, int, int]:
        """The base-210 generator state as ``(prev, current, carry)``."""
        return self.prev, self.current, self.carry

    @triple.setter
    def triple(self, value: Tuple[int, int, int]) -> None:
        self.prev, self.current, self.carry = value
