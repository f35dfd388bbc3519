"""Deterministic multi-stream runner built on the reseed mechanism."""

import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, List

from .prng import MAX_LIMIT, StableRandom
from .views import select_register_view

logger = logging.getLogger(__name__)


def _hex(register: int) -> str:
    return f"0x{register:016x}"


@dataclass
class StreamConfig:
    """Configuration for one multi-stream run."""

    seed: int = 0
    streams: int = 1
    count: int = 16
    limit: int = 0  # 0 = full 16-bit output
    reseed: int = 0  # reseeds applied to the base register before deriving streams
    overlay: bool = False


@dataclass
class StreamLog:
    stream: int
    initial_state: str
    final_state: str
    values: List[int]


def _validate(cfg: StreamConfig) -> None:
    if not 0 <= cfg.limit <= MAX_LIMIT:
        raise ValueError(f"limit must be within 0..{MAX_LIMIT}, received {cfg.limit}.")
    for name in ("streams", "count", "reseed"):
        if getattr(cfg, name) < 0:
            raise ValueError(f"{name} must be non-negative, received {getattr(cfg, name)}.")


def run_streams(cfg: StreamConfig) -> Dict[str, Any]:
    """Derive ``cfg.streams`` streams from the base seed and draw from each."""

    _validate(cfg)
    base = StableRandom(cfg.seed, view=select_register_view(cfg.overlay))
    base.reseed(cfg.reseed)
    logger.debug("deriving %d stream(s) from base register %s", cfg.streams, _hex(base.state))

    log: List[StreamLog] = []
    for index, rng in enumerate(base.spawn(cfg.streams)):
        initial = rng.state
        values = [int(value) for value in rng.draws(cfg.count, cfg.limit)]
        log.append(
            StreamLog(
                stream=index,
                initial_state=_hex(initial),
                final_state=_hex(rng.state),
                values=values,
            )
        )

    return {
        "config": asdict(cfg),
        "streams": [asdict(entry) for entry in log],
        "final": {
            "base_state": _hex(base.state),
            "streams": len(log),
            "draws": sum(len(entry.values) for entry in log),
        },
    }


if __name__ == "__main__":
    import json

    result = run_streams(StreamConfig())
    print(json.dumps(result, indent=2))
