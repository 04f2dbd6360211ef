import logging
from typing import Iterator

import pytest


@pytest.fixture(autouse=True)
def reset_package_log_level() -> Iterator[None]:
    pkg_logger = logging.getLogger("kvtable")
    level = pkg_logger.level
    yield
    pkg_logger.setLevel(level)
