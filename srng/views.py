"""Mappings between the 64-bit register and the five-field sub-state.

``PackedRegisterView`` spells the bit offsets out and is correct everywhere.
``OverlayRegisterView`` reinterprets the register's native in-memory bytes as a
structured numpy record, which only agrees with the fixed offsets on
little-endian hosts, so it is handed out only after ``overlay_is_equivalent``
has confirmed the mapping.
"""

import logging
from typing import Optional, Protocol

import numpy as np

from .models import (
    CARRY_OFFSET,
    CURRENT_OFFSET,
    LINEAR_OFFSET,
    PREV_OFFSET,
    SHIFT_OFFSET,
    SubState,
)
from .steps import MASK8, MASK32

logger = logging.getLogger(__name__)

_OVERLAY_DTYPE = np.dtype(
    [
        ("shift", "=u4"),
        ("carry", "u1"),
        ("current", "u1"),
        ("prev", "u1"),
        ("linear", "u1"),
    ]
)
_FIELDS = ("shift", "carry", "current", "prev", "linear")

_PROBE_REGISTER = 0x0123456789ABCDEF
_PROBE_STATE = SubState(shift=0x89ABCDEF, carry=0x67, current=0x45, prev=0x23, linear=0x01)


class RegisterView(Protocol):
    def load(self, register: int) -> SubState:
        ...

    def store(self, state: SubState) -> int:
        ...


class PackedRegisterView:
    """Explicit shift-and-mask packing at the fixed offsets."""

    def load(self, register: int) -> SubState:
        return SubState(
            shift=(register >> SHIFT_OFFSET) & MASK32,
            carry=(register >> CARRY_OFFSET) & MASK8,
            current=(register >> CURRENT_OFFSET) & MASK8,
            prev=(register >> PREV_OFFSET) & MASK8,
            linear=(register >> LINEAR_OFFSET) & MASK8,
        )

    def store(self, state: SubState) -> int:
        return (
            (state.shift & MASK32) << SHIFT_OFFSET
            | (state.carry & MASK8) << CARRY_OFFSET
            | (state.current & MASK8) << CURRENT_OFFSET
            | (state.prev & MASK8) << PREV_OFFSET
            | (state.linear & MASK8) << LINEAR_OFFSET
        )

    def __repr__(self) -> str:
        return "PackedRegisterView()"


class OverlayRegisterView:
    """Reads the sub-state straight out of the register's native byte layout."""

    def load(self, register: int) -> SubState:
        record = np.array([register], dtype=np.uint64).view(_OVERLAY_DTYPE)
        return SubState(**{name: int(record[name][0]) for name in _FIELDS})

    def store(self, state: SubState) -> int:
        record = np.zeros(1, dtype=_OVERLAY_DTYPE)
        for name in _FIELDS:
            record[name][0] = getattr(state, name)
        return int(record.view(np.uint64)[0])

    def __repr__(self) -> str:
        return "OverlayRegisterView()"


PACKED_VIEW = PackedRegisterView()
OVERLAY_VIEW = OverlayRegisterView()

_overlay_verified: Optional[bool] = None


def overlay_is_equivalent() -> bool:
    """Check once per process that the overlay matches the packed offsets."""
    global _overlay_verified
    if _overlay_verified is None:
        loaded = OVERLAY_VIEW.load(_PROBE_REGISTER)
        _overlay_verified = (
            loaded == _PROBE_STATE
            and OVERLAY_VIEW.store(_PROBE_STATE) == _PROBE_REGISTER
            and PACKED_VIEW.load(_PROBE_REGISTER) == _PROBE_STATE
        )
        logger.debug("overlay register view equivalent: %s", _overlay_verified)
    return _overlay_verified


def select_register_view(prefer_overlay: bool = False) -> RegisterView:
    if prefer_overlay and overlay_is_equivalent():
        return OVERLAY_VIEW
    if prefer_overlay:
        logger.debug("overlay view rejected on this host; using packed view")
    return PACKED_VIEW
