from __future__ import annotations

from collections.abc import Iterator

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _drop_log_handlers() -> Iterator[None]:
    # The CLI binds a sink to the captured stderr of the running test
    yield
    logger.remove()
