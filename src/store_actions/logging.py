"""Logging helpers for store_actions."""

from __future__ import annotations

import logging

LOGGER_NAME = "store_actions"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger with a terse format.

    Parameters mirror ``logging.basicConfig``. The library itself never
    installs handlers; applications call this (or configure logging their
    own way) to see the debug output of bindings, cache frees and loading
    flips. Pass ``force=True`` to reconfigure during tests.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    logging.getLogger(LOGGER_NAME).setLevel(level)
