"""Generator-level tests: determinism, reseeding and range reduction."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from srng import StableRandom, draw
from srng.prng import CYCLE_TRIGGERS
from srng.steps import halfword_lcg, rotate_left16


def _sequence(seed, count=32, limit=0):
    rng = StableRandom(seed)
    return [rng.draw(limit) for _ in range(count)], rng.state


def test_draw_is_deterministic():
    assert _sequence(0xDEADBEEF) == _sequence(0xDEADBEEF)
    assert _sequence(0xDEADBEEF, limit=37) == _sequence(0xDEADBEEF, limit=37)
    assert _sequence(0xDEADBEEF)[0] != _sequence(0xDEADBEF0)[0]


def test_register_is_masked_to_64_bits():
    assert StableRandom(2**64 + 5).state == 5
    assert StableRandom(-1).state == 0xFFFFFFFFFFFFFFFF


def test_missing_register_returns_zero():
    assert draw(None, 10, 3) == 0
    assert draw(None) == 0


def test_zero_register_scenarios():
    rng = StableRandom(0)
    assert 0 <= draw(rng, 10, 0) < 10

    rng = StableRandom(0)
    expected = StableRandom(0)
    for _ in range(3):
        expected.derive_seed()

    assert draw(rng, 1, 3) == 0
    assert rng.state == expected.state


def test_reseed_only_call_matches_seed_engine():
    for seed in (1, 0x0123456789ABCDEF, 0xFFFFFFFFFFFFFFFF):
        rng = StableRandom(seed)
        reference = rng.copy()

        assert draw(rng, 1, 2) == 0
        reference.derive_seed()
        reference.derive_seed()
        assert rng.state == reference.state


def test_limit_one_consumes_nothing():
    rng = StableRandom(0x55AA55AA55AA55AA)
    before = rng.state

    assert rng.randrange(1) == 0
    assert rng.state == before


def test_full_width_passthrough():
    rng = StableRandom(0x243F6A8885A308D4)
    reference = rng.copy()

    for _ in range(50):
        assert draw(rng, 0, 0) == reference.next_halfword()
    assert rng.state == reference.state


def test_power_of_two_limits_mask_the_raw_draw():
    rng = StableRandom(0xC0FFEE)
    reference = rng.copy()

    for limit in (2, 16, 256, 1024, 32768):
        assert draw(rng, limit, 0) == reference.next_halfword() & (limit - 1)
    assert rng.state == reference.state


def test_power_of_two_low_bits_are_uniform():
    rng = StableRandom(0x9E3779B97F4A7C16)
    counts = np.bincount(rng.draws(16000, 16), minlength=16)

    assert counts.sum() == 16000
    assert counts.min() > 750
    assert counts.max() < 1250


def test_draws_respect_limit():
    rng = StableRandom(0x1234)
    for limit in (2, 3, 5, 7, 10, 100, 1000, 40000, 65535):
        values = rng.draws(200, limit)
        assert values.dtype == np.uint16
        assert int(values.max()) < limit


def test_draw_above_limit_needs_no_resample():
    rng = StableRandom(0xFEEDFACE)
    reference = rng.copy()
    raw = reference.next_halfword()

    value = rng.randrange(3)

    assert 0 <= value < 3
    if raw >= 3:
        assert value == raw % 3
        assert rng.state == reference.state


def test_rejection_discards_biased_region():
    # 65536 % 40000 == 25536, so only raw draws in [25536, 65536) are accepted.
    rng = StableRandom(0x0BADC0DE)
    for _ in range(100):
        reference = rng.copy()
        value = rng.randrange(40000)
        raw = reference.next_halfword()
        while raw < 25536:
            raw = reference.next_halfword()
        assert value == raw % 40000
        assert rng.state == reference.state


def _halfword_without_trigger_check(rng):
    buffer = rng.next_bytes(2)
    control = rng.next_byte()
    for _ in range((control & 3) + 2):
        buffer = halfword_lcg(buffer)
    buffer = rotate_left16(buffer, control >> 4)
    return (buffer * (3 + ((control & 12) >> 1))) & 0xFFFF


def test_halfword_matches_its_arithmetic_off_trigger():
    rng = StableRandom(0x0123456789ABCDEF)
    reference = rng.copy()

    for _ in range(20):
        assert rng.next_halfword() == _halfword_without_trigger_check(reference)
    assert rng.state == reference.state


def test_cycle_triggers_move_to_the_next_trigger():
    for index, trigger in enumerate(CYCLE_TRIGGERS):
        moved = StableRandom(trigger)
        successor = StableRandom(CYCLE_TRIGGERS[(index + 1) % len(CYCLE_TRIGGERS)])

        assert moved.next_halfword() == _halfword_without_trigger_check(successor)
        assert moved.state == successor.state
        assert moved.state not in CYCLE_TRIGGERS


def test_serialised_register_restores_stream():
    rng = StableRandom(0x31415926)
    rng.draw(100, 1)
    saved = rng.state
    tail = [rng.draw(500) for _ in range(20)]

    restored = StableRandom(int(f"0x{saved:016x}", 16))
    assert [restored.draw(500) for _ in range(20)] == tail


def test_spawn_matches_successive_reseeds():
    parent = StableRandom(42)
    reference = parent.copy()
    children = parent.spawn(3)

    expected = [reference.derive_seed() for _ in range(3)]
    assert [child.state for child in children] == expected
    assert parent.state == expected[-1]
    assert len(set(expected)) == 3


def test_independent_registers_run_on_threads():
    seeds = list(range(1, 9))
    sequential = [_sequence(seed, count=64, limit=1000) for seed in seeds]

    with ThreadPoolExecutor(max_workers=4) as pool:
        threaded = list(pool.map(lambda seed: _sequence(seed, count=64, limit=1000), seeds))

    assert threaded == sequential


def test_random_and_randint_ranges():
    rng = StableRandom(7)
    for _ in range(200):
        assert 0.0 <= rng.random() < 1.0
        assert -3 <= rng.randint(-3, 3) <= 3
        assert 0 <= rng.randint(0, 65535) <= 65535


@pytest.mark.parametrize(
    "call",
    [
        lambda rng: rng.randrange(65536),
        lambda rng: rng.randrange(-1),
        lambda rng: rng.draw(70000, 0),
        lambda rng: rng.draw(65536, 2),
        lambda rng: rng.reseed(-1),
        lambda rng: rng.spawn(-2),
        lambda rng: rng.randint(5, 4),
        lambda rng: rng.randint(0, 65536),
    ],
)
def test_out_of_domain_arguments_raise(call):
    rng = StableRandom(99)
    before = rng.state

    with pytest.raises(ValueError):
        call(rng)
    assert rng.state == before
