"""
Test suite for identifier generation

Covers both identifier strategies: the legacy clock-derived scheme and the
default random-suffix scheme.
"""

import pytest

from tracechain.core.identifiers import IdentifierGenerator, current_timestamp


def test_current_timestamp_truncates_to_seconds():
    """Clock readings are truncated to whole seconds"""
    assert current_timestamp(lambda: 1700000000.987) == 1700000000


def test_clock_strategy_format():
    """Clock strategy combines seconds with the fine clock modulo 10000"""
    generator = IdentifierGenerator(strategy="clock", clock=lambda: 1700000000.5,
                                    fine_clock=lambda: 1700000000_123456789)
    assert generator.generate_id() == "1700000000_6789"


def test_clock_strategy_collides_on_congruent_readings():
    """Same second and congruent fine clock readings yield the same identifier"""
    readings = iter([10_000_0042, 20_000_0042])
    generator = IdentifierGenerator(strategy="clock", clock=lambda: 1700000000.0,
                                    fine_clock=lambda: next(readings))
    assert generator.generate_id() == generator.generate_id()


def test_unique_strategy_format_and_uniqueness(benchmark):
    """Unique strategy keeps the '{seconds}_{suffix}' shape without collisions"""
    generator = IdentifierGenerator(clock=lambda: 1700000000.0)

    def execute():
        return [generator.generate_id() for _ in range(1000)]

    identifiers = benchmark(execute)
    assert len(set(identifiers)) == len(identifiers)
    for identifier in identifiers[:10]:
        timestamp, suffix = identifier.split("_")
        assert timestamp == "1700000000"
        assert len(suffix) == 12
        int(suffix, 16)


def test_generator_is_callable():
    generator = IdentifierGenerator(clock=lambda: 42.0)
    assert generator().startswith("42_")


def test_unknown_strategy_rejected():
    with pytest.raises(ValueError, match="Unsupported identifier strategy"):
        IdentifierGenerator(strategy="sequential")
