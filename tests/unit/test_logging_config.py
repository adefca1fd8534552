from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from blog_backend.infrastructure.logging import configure_logging


@pytest.fixture
def reset_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    root.handlers.clear()
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.mark.usefixtures("reset_root_logger")
def test_configure_logging_sets_requested_level() -> None:
    configure_logging(level="debug")

    assert logging.getLogger().level == logging.DEBUG


@pytest.mark.usefixtures("reset_root_logger")
def test_configure_logging_falls_back_to_info_for_unknown_level() -> None:
    configure_logging(level="chatty")

    assert logging.getLogger().level == logging.INFO


@pytest.mark.usefixtures("reset_root_logger")
def test_configure_logging_routes_uvicorn_loggers_to_root() -> None:
    uvicorn_logger = logging.getLogger("uvicorn.access")
    uvicorn_logger.addHandler(logging.NullHandler())
    uvicorn_logger.propagate = False

    configure_logging(level="INFO")

    assert uvicorn_logger.handlers == []
    assert uvicorn_logger.propagate is True
