"""Shared pytest fixtures."""

import logging

import pytest
from pageclip.logging_config import CONSOLE_HANDLER, FILE_HANDLER


@pytest.fixture(autouse=True)
def reset_pageclip_logging():
    """Drop handlers installed by setup_logging so each test starts clean."""
    yield
    logger = logging.getLogger("pageclip")
    for handler in list(logger.handlers):
        if handler.get_name() in (CONSOLE_HANDLER, FILE_HANDLER):
            logger.removeHandler(handler)
            handler.close()
