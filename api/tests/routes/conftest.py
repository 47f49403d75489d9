"""Route tests run with the shared limiter switched off."""

from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def _disable_rate_limiter():
    """Many catalog requests per test would otherwise trip the write limit."""
    with patch("core.ratelimit.limiter.enabled", False):
        yield
