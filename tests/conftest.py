import logging

import pytest

from abench.logger import BenchLogger


@pytest.fixture
def bench_logger(tmp_path):
    """BenchLogger writing into a temporary log directory"""
    logger = BenchLogger(log_dir=str(tmp_path / "logs"))
    yield logger
    logger.close()


@pytest.fixture(autouse=True)
def reset_bench_logging():
    yield
    for handler in list(logging.getLogger("abench").handlers):
        logging.getLogger("abench").removeHandler(handler)
        handler.close()
