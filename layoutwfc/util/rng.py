"""Seeded random streams, one per generation concern.

Every consumer of randomness in the generator (the solver's tie-break and tile
picks, Voronoi seeding, building placement) draws from its own stream derived
from a single master seed. The same master seed therefore reproduces the same
layout, and adding draws to one concern never shifts another concern's
sequence.

Usage:
    from layoutwfc.util import rng
    rng.init(config.RANDOM_SEED)

    _rng = rng.get("layout.seeding")

    def coin_flip() -> bool:
        return _rng.random() < 0.5

Domain naming convention (hierarchical):
    - "layout.wfc"       solver selection and collapse
    - "layout.seeding"   Voronoi points and building seeds
"""

from __future__ import annotations

import zlib
from random import Random
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from layoutwfc.types import RandomSeed


class RNGStream:
    """Proxy that forwards to whatever Random currently backs a domain.

    Holding an RNGStream is safe across rng.reset(): the backing Random is
    looked up from the provider on every call.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self._domain = domain

    @property
    def domain(self) -> str:
        return self._domain

    def _rng(self) -> Random:
        return self._provider._get_raw(self._domain)

    def random(self) -> float:
        """Return random float in [0.0, 1.0)."""
        return self._rng().random()

    def randrange(self, start: int, stop: int | None = None, step: int = 1) -> int:
        """Return randomly selected element from range(start, stop, step)."""
        return self._rng().randrange(start, stop, step)


# Anything the solver and seeding accept as a random source.
RNG: TypeAlias = Random | RNGStream


class RNGProvider:
    """Hands out one Random per domain, derived from the master seed."""

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self._master_seed = master_seed
        self._streams: dict[str, Random] = {}
        self._proxies: dict[str, RNGStream] = {}

    @property
    def master_seed(self) -> RandomSeed:
        return self._master_seed

    def get(self, domain: str) -> RNGStream:
        """Return the cacheable stream proxy for ``domain``."""
        if domain not in self._proxies:
            self._proxies[domain] = RNGStream(self, domain)
        return self._proxies[domain]

    def _get_raw(self, domain: str) -> Random:
        if domain not in self._streams:
            if self._master_seed is None:
                self._streams[domain] = Random()
            else:
                # crc32 rather than hash(): str hashing is salted per process
                # (PYTHONHASHSEED) and would break cross-run determinism.
                derived_seed = zlib.crc32(f"{self._master_seed}:{domain}".encode())
                self._streams[domain] = Random(derived_seed)
        return self._streams[domain]

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reseed every domain. Existing proxies pick up the new streams."""
        self._master_seed = master_seed
        self._streams.clear()


# =============================================================================
# Module-level API
# =============================================================================

_provider: RNGProvider | None = None


def init(master_seed: RandomSeed = None) -> None:
    """Initialize (or reseed) the process-wide provider."""
    global _provider
    if _provider is not None:
        _provider.reset(master_seed)
    else:
        _provider = RNGProvider(master_seed)


def get(domain: str) -> RNGStream:
    """Return the stream for ``domain``, creating an unseeded provider if needed.

    Call init() first when reproducible output is wanted.
    """
    global _provider
    if _provider is None:
        _provider = RNGProvider(None)
    return _provider.get(domain)


def reset(master_seed: RandomSeed = None) -> None:
    """Reseed all streams of the initialized provider."""
    if _provider is None:
        raise RuntimeError("RNG not initialized - call rng.init() first")
    _provider.reset(master_seed)
