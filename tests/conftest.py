"""Pytest configuration for test isolation.

Settings are read from ``OA_*`` environment variables and the CLI also loads a
``.env`` from the working directory. A developer's shell or ``.env`` must not
leak into tests, so each test runs from an empty temporary directory with the
``OA_*`` variables cleared.

The CLI configures the package logger once per process; the logging state is
reset around each test so a handler bound to one test's captured stream is not
reused by the next.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest

import order_analysis.logging_setup as logging_setup


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("OA_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    pkg_logger = logging.getLogger("order_analysis")
    for h in list(pkg_logger.handlers):
        pkg_logger.removeHandler(h)
    pkg_logger.propagate = True
    pkg_logger.setLevel(logging.NOTSET)
    logging_setup._CONFIGURED = False
