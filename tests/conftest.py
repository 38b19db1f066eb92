import logging

import pytest

from sentinel.security import MemoryStore, ServiceRegistry
from sentinel.totp import StdlibHmacProvider, TotpEngine

SECRET = "JBSWY3DPEHPK3PXP"
EPOCH = 1634000000


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def registry(store: MemoryStore) -> ServiceRegistry:
    return ServiceRegistry(store)


@pytest.fixture
def engine() -> TotpEngine:
    return TotpEngine(clock=lambda: EPOCH)


@pytest.fixture
def stdlib_engine() -> TotpEngine:
    return TotpEngine(provider=StdlibHmacProvider(), clock=lambda: EPOCH)


@pytest.fixture(autouse=True)
def _propagate_sentinel_logs(monkeypatch: pytest.MonkeyPatch):
    # the CLI disables propagation on the package logger; caplog listens on the root logger
    package_logger = logging.getLogger("sentinel")
    monkeypatch.setattr(package_logger, "propagate", True)
    yield
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
