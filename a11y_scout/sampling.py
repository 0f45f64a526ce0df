# File: a11y_scout/sampling.py
"""Deterministic sampling of candidate URLs.

Scheduled scans of the same site must visit a consistent subset of its pages,
otherwise run-to-run comparisons would compare disjoint random samples. The
sampler is therefore a pure function of ``(urls, strategy, seed)``: the seed is
hashed into a 32-bit integer which drives a small mulberry32 generator, and the
generator drives a Fisher–Yates shuffle.

The hash walks UTF-16 code units so that a seed maps to the same integer as it
does in browser-side tooling that shares these sample sets.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Optional, Sequence, TypeVar
from urllib.parse import urlsplit

__all__ = (
    "SampleStrategy",
    "SampleConfig",
    "hash_seed",
    "Mulberry32",
    "seeded_shuffle",
    "sample_urls",
    "resolve_sample_seed",
    "DEFAULT_SEED",
)

SampleStrategy = Literal["shuffle", "sequential"]

DEFAULT_SEED = "sitemap"

_MASK32 = 0xFFFFFFFF

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class SampleConfig:
    """Sampling parameters; immutable for the duration of a run."""

    max_pages: int
    strategy: SampleStrategy = "shuffle"
    seed: str = DEFAULT_SEED

    def __post_init__(self) -> None:
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be > 0, got {self.max_pages}")
        if self.strategy not in ("shuffle", "sequential"):
            raise ValueError(f"unknown sample strategy: {self.strategy!r}")


def _utf16_units(text: str) -> List[int]:
    data = text.encode("utf-16-le")
    return [data[i] | (data[i + 1] << 8) for i in range(0, len(data), 2)]


def hash_seed(seed: str) -> int:
    """Polynomial rolling hash (×31) of *seed*, wrapped to an unsigned 32-bit int."""
    h = 0
    for unit in _utf16_units(seed):
        h = (h * 31 + unit) & _MASK32
    return h


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK32


class Mulberry32:
    """mulberry32 PRNG: 32-bit state, add + xorshift-multiply avalanche.

    ``random()`` returns floats in ``[0, 1)``.
    """

    __slots__ = ("_state",)

    def __init__(self, seed: int) -> None:
        self._state = seed & _MASK32

    def next_uint32(self) -> int:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return (t ^ (t >> 14)) & _MASK32

    def random(self) -> float:
        return self.next_uint32() / 4294967296


def seeded_shuffle(items: Sequence[T], seed: str) -> List[T]:
    """Return a Fisher–Yates shuffled copy of *items*; *items* is left untouched."""
    rng = Mulberry32(hash_seed(seed))
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rng.random() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def sample_urls(urls: Sequence[str], config: SampleConfig) -> List[str]:
    """Reduce *urls* to at most ``config.max_pages`` entries, reproducibly.

    ``sequential`` keeps the first N in declared order (sitemaps tend to list
    important pages first); ``shuffle`` takes the first N of a seeded shuffle.
    """
    if config.strategy == "sequential" or len(urls) <= 1:
        return list(urls[: config.max_pages])
    return seeded_shuffle(urls, config.seed)[: config.max_pages]


def resolve_sample_seed(
    provided_seed: Optional[str] = None,
    label: Optional[str] = None,
    base_url: Optional[str] = None,
    url: Optional[str] = None,
) -> str:
    """Pick the sampling seed from the most stable site identity available.

    Order: explicit seed, site label, base URL, hostname of *url*, then
    :data:`DEFAULT_SEED`. Run timestamps are never used.
    """
    for candidate in (provided_seed, label, base_url):
        if candidate:
            return candidate
    if url:
        host = urlsplit(url).hostname
        if host:
            return host
    return DEFAULT_SEED
