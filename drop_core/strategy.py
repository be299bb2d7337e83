"""Counter-activation rules evaluated by the simulation engine."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Threshold:
    """Counter is active once it rises above ``value``."""

    value: int

    def decide(self, counter: int) -> bool:
        return counter > self.value

    def describe(self) -> str:
        return f"counter > {self.value}"

    def dump(self, max_counter: int) -> Iterator[tuple[int, bool]]:
        return _dump(self, max_counter)


@dataclass(frozen=True)
class InverseThreshold:
    """Counter is active while it stays below ``value``."""

    value: int

    def decide(self, counter: int) -> bool:
        return counter < self.value

    def describe(self) -> str:
        return f"counter < {self.value}"

    def dump(self, max_counter: int) -> Iterator[tuple[int, bool]]:
        return _dump(self, max_counter)


@dataclass(frozen=True)
class XorThresholds:
    """Active when an even number of thresholds lie strictly above the counter.

    Repeated values are counted once per occurrence, so a duplicated threshold
    cancels itself out.
    """

    values: tuple[int, ...]

    def decide(self, counter: int) -> bool:
        above = sum(1 for value in self.values if counter < value)
        return above % 2 == 0

    def describe(self) -> str:
        return f"xor(counter < t for t in {list(self.values)})"

    def dump(self, max_counter: int) -> Iterator[tuple[int, bool]]:
        return _dump(self, max_counter)


@dataclass(frozen=True)
class XorInverseThresholds:
    """Active when an even number of thresholds lie strictly below the counter.

    This is the family explored by the greedy search: with no thresholds the
    counter is always active, and each threshold flips the flag for every
    counter value above it.
    """

    values: tuple[int, ...]

    def decide(self, counter: int) -> bool:
        below = sum(1 for value in self.values if counter > value)
        return below % 2 == 0

    def describe(self) -> str:
        return f"xor(counter > t for t in {list(self.values)})"

    def dump(self, max_counter: int) -> Iterator[tuple[int, bool]]:
        return _dump(self, max_counter)


Strategy = Union[Threshold, InverseThreshold, XorThresholds, XorInverseThresholds]


def _dump(strategy: Strategy, max_counter: int) -> Iterator[tuple[int, bool]]:
    for counter in range(max_counter + 1):
        yield counter, strategy.decide(counter)


def xor_inverse(values: Iterable[int]) -> XorInverseThresholds:
    """Build an ``XorInverseThresholds`` strategy from any iterable of ints."""

    return XorInverseThresholds(tuple(int(value) for value in values))


def active_ranges(strategy: Strategy, max_counter: int) -> list[tuple[int, int]]:
    """Return inclusive ``(start, end)`` counter spans where the strategy is active.

    Used for compact reporting of multi-threshold strategies.
    """

    spans: list[tuple[int, int]] = []
    start: int | None = None
    for counter, active in strategy.dump(max_counter):
        if active and start is None:
            start = counter
        elif not active and start is not None:
            spans.append((start, counter - 1))
            start = None
    if start is not None:
        spans.append((start, max_counter))
    return spans
