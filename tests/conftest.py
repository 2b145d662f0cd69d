from __future__ import annotations

from collections.abc import Iterator

import pytest

from layoutwfc.util import rng


@pytest.fixture(autouse=True)
def seeded_rng_streams() -> Iterator[None]:
    """Give every test the same master seed so default streams are repeatable."""
    rng.init("layoutwfc-tests")
    yield
    rng.init("layoutwfc-tests")
