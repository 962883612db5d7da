from __future__ import annotations

import sys

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_logger():
    yield
    # CLI tests point the sink at a captured stream that pytest closes.
    logger.remove()
    logger.add(sys.stderr, level="DEBUG")
