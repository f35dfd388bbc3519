"""Command line harness for deriving and sampling stable random streams."""

import argparse
import json
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_LOG_PATH = PROJECT_ROOT / "srng_logs" / "latest_run.json"

if PROJECT_ROOT.as_posix() not in sys.path:
    sys.path.insert(0, PROJECT_ROOT.as_posix())

from srng import StreamConfig, run_streams

logger = logging.getLogger("srng.cli")


def _parse_register(value: str) -> int:
    """Parse a decimal or 0x-prefixed register value."""

    try:
        register = int(value, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid register value '{value}'.") from exc

    if not 0 <= register <= 0xFFFFFFFFFFFFFFFF:
        raise argparse.ArgumentTypeError("Register must fit in 64 unsigned bits.")
    return register


def _parse_limit(value: str) -> int:
    try:
        limit = int(value, 0)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid limit '{value}'.") from exc

    if not 0 <= limit <= 0xFFFF:
        raise argparse.ArgumentTypeError("Limit must be within 0..65535.")
    return limit


def _parse_count(value: str) -> int:
    try:
        count = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected an integer, received '{value}'.") from exc

    if count < 0:
        raise argparse.ArgumentTypeError("Counts must be non-negative integers.")
    return count


def _parse_bool(value: str) -> bool:
    """Accept a variety of truthy / falsy CLI inputs."""

    if isinstance(value, bool):  # argparse may pass in already parsed bools
        return value

    normalized = value.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise argparse.ArgumentTypeError(f"Expected a boolean value, received '{value}'.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Derive and sample deterministic 16-bit random streams")
    parser.add_argument(
        "--seed",
        type=_parse_register,
        default=0,
        help="Base 64-bit register (accepts decimal or 0x-prefixed hex)",
    )
    parser.add_argument("--streams", type=_parse_count, default=1, help="Number of streams to derive")
    parser.add_argument("--count", type=_parse_count, default=16, help="Draws per stream")
    parser.add_argument(
        "--limit",
        type=_parse_limit,
        default=0,
        help="Exclusive upper bound for each draw; 0 yields full 16-bit values",
    )
    parser.add_argument(
        "--reseed",
        type=_parse_count,
        default=0,
        help="Reseeds applied to the base register before streams are derived",
    )
    parser.add_argument(
        "--overlay",
        type=_parse_bool,
        default=False,
        help="Prefer the in-memory overlay register view when this host supports it",
    )
    parser.add_argument("--verbose", action="store_true", help="Emit debug logging on stderr")
    parser.add_argument(
        "--log",
        nargs="?",
        type=Path,
        const=DEFAULT_LOG_PATH,
        help=(
            "Persist the JSON report to disk. Provide a path or pass the flag alone to use "
            "srng_logs/latest_run.json under the repository root."
        ),
    )
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    cfg = StreamConfig(
        seed=args.seed,
        streams=args.streams,
        count=args.count,
        limit=args.limit,
        reseed=args.reseed,
        overlay=args.overlay,
    )
    result = run_streams(cfg)

    log_path: Path | None = args.log
    if log_path is not None:
        if not log_path.is_absolute():
            log_path = (PROJECT_ROOT / log_path).resolve()

        log_path.parent.mkdir(parents=True, exist_ok=True)
        log_path.write_text(json.dumps(result, indent=2))
        logger.info("wrote report to %s", log_path)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
