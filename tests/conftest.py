import pytest

from scanner.models import EndpointConfig, Endpoints
from scanner.timers import DelayAccumulator

PRIMARY = "http://primary.test/rpc"
SECONDARY = "http://secondary.test/rpc"


@pytest.fixture
def endpoints():
    return Endpoints(primary=EndpointConfig(PRIMARY, 0), secondary=EndpointConfig(SECONDARY, 0))


@pytest.fixture
def accumulator():
    # ticker not started: reservations stay put unless a test ticks them
    return DelayAccumulator()


@pytest.fixture
def settings_env(tmp_path, monkeypatch):
    """Isolate settings lookup from the developer's machine."""
    for key in (
        "JSONRPC_URL_1",
        "JSONRPC_URL_2",
        "JSONRPC_LATENCY_1",
        "JSONRPC_LATENCY_2",
        "STORAGE_DB_PATH",
        "STORAGE_FILE_PATH",
        "SCAN_API_KEY",
        "MYTHX_API_KEY",
        "MERTER_RPC_TIMEOUT",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return tmp_path
