"""Shared fixtures for prompt-refiner tests."""

from pathlib import Path
from typing import Callable, Dict, Generator, List

import httpx
import pytest

from prompt_refiner.config import RefinerConfig


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a real ~/.config/prompt-refiner/config.yaml out of the tests."""
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("REFINER_CONFIG", raising=False)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def refiner_config() -> RefinerConfig:
    """Webhook settings with fast retries for tests."""
    return RefinerConfig(
        webhook_url="http://refiner.test/webhook/refine-prompt",
        timeout_ms=2000,
        max_retries=3,
        base_delay_ms=1,
    )


@pytest.fixture
def scripted_transport() -> Callable[[List[httpx.Response]], httpx.MockTransport]:
    """Build a MockTransport that replays responses in order and records requests."""

    def build(responses: List[httpx.Response]) -> httpx.MockTransport:
        queue = list(responses)
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return queue.pop(0)

        transport = httpx.MockTransport(handler)
        transport.requests = requests
        return transport

    return build


@pytest.fixture
def socket_path(tmp_path: Path) -> Generator[Path, None, None]:
    """Short socket path inside the test's temp directory."""
    yield tmp_path / "r.sock"


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary config file for testing."""
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text("""
webhook_url: http://file.test/webhook
timeout_ms: 9000
max_retries: 5
base_delay_ms: 250
socket_path: /tmp/file-refiner.sock
cache_ttl_ms: 30000
cache_max_entries: 50
use_daemon: false
""")
    yield config_file


@pytest.fixture
def webhook_payloads() -> Dict[str, object]:
    """Response shapes seen from different workflow builders."""
    return {
        'output': {"output": "Refined via output"},
        'array': [{"refined": "Refined via array"}],
        'nested': {"data": {"choices": [{"message": {"content": "Refined via nesting"}}]}},
        'double_encoded': {"text": "\"Refined \\\"quoted\\\"\""},
    }
