"""
Shared fixtures for the miner tests.

- wallet built from a well-known development key
- RecordingLog standing in for WalletLogger
- clean log viewer buffers between tests
"""

from unittest.mock import AsyncMock

import pytest

import flask_log_server
from models import Wallet

DEV_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
DEV_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"


class RecordingLog:
    """Collects (level, message) pairs and stage transitions."""

    def __init__(self):
        self.lines = []
        self.stages = []

    def info(self, msg):
        self.lines.append(("info", msg))

    def warn(self, msg):
        self.lines.append(("warn", msg))

    def error(self, msg):
        self.lines.append(("error", msg))

    def stage(self, name):
        self.stages.append(name)

    def messages(self, level):
        return [msg for lvl, msg in self.lines if lvl == level]


@pytest.fixture(autouse=True)
def clean_log_buffers():
    flask_log_server.LOGS.clear()
    flask_log_server.LOG_COUNTS.clear()
    flask_log_server.WALLET_STATUS.clear()
    yield


@pytest.fixture
def wallet():
    return Wallet(address=DEV_ADDRESS, private_key=DEV_KEY, proxy="127.0.0.1:3128")


@pytest.fixture
def log():
    return RecordingLog()


@pytest.fixture
def sleep():
    return AsyncMock()
