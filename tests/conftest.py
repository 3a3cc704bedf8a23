from __future__ import annotations

import logging
from typing import Iterator

import pytest

import codeinsight
from codeinsight import InsightEngine


@pytest.fixture
def engine() -> InsightEngine:
    """Provide a fresh engine with its own prototype store and metrics."""
    return InsightEngine()


@pytest.fixture(autouse=True)
def _isolate_global_state() -> Iterator[None]:
    """Drop the module-level engine and CLI logging handlers between tests."""
    codeinsight.reset_default_engine()
    yield
    codeinsight.reset_default_engine()
    logger = logging.getLogger("codeinsight")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
