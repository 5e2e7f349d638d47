import pytest

from calculator.config import CalculatorConfig, reset_config
from calculator.display import Display
from calculator.history import HistoryLedger, MemoryKeyValueStore
from calculator.session import CalculatorSession


ENV_VARS = [
    "CALC_MAX_EXPRESSION_LENGTH",
    "CALC_HISTORY_MAX",
    "CALC_FLASH_MS",
    "CALC_HISTORY_KEY",
    "CALC_DATABASE_URL",
    "PLATFORM_DATABASE_URL",
    "DATABASE_URL",
    "CALC_PERSIST_HISTORY",
    "CALC_LOG_LEVEL",
]


class FakeClock:
    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class Stamps:
    def __init__(self):
        self.n = 0

    def __call__(self):
        self.n += 1
        return f"2024-01-01T00:00:{self.n:02d}.000Z"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryKeyValueStore()


@pytest.fixture
def stamps():
    return Stamps()


@pytest.fixture
def ledger(store, stamps):
    return HistoryLedger(store, max_entries=50, clock=stamps)


@pytest.fixture
def session(ledger, clock):
    config = CalculatorConfig(persist_history=False)
    return CalculatorSession(config, ledger=ledger, display=Display(flash_ms=700, clock=clock))
