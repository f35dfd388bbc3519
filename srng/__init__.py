"""Public package surface for the stable 16-bit random number generator."""

from .models import SubState
from .prng import StableRandom, draw
from .streams import StreamConfig, run_streams
from .views import (
    OverlayRegisterView,
    PackedRegisterView,
    RegisterView,
    overlay_is_equivalent,
    select_register_view,
)

__all__ = [
    "OverlayRegisterView",
    "PackedRegisterView",
    "RegisterView",
    "StableRandom",
    "StreamConfig",
    "SubState",
    "draw",
    "overlay_is_equivalent",
    "run_streams",
    "select_register_view",
]
