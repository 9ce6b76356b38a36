import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from app.config import ConfigStats
from app.stats import MemoryClient, NoopStats, Statsd, StatsdMiddleware, setup_stats, get_stats


@pytest.fixture
def memory_client() -> MemoryClient:
    return MemoryClient()


def test_memory_client_timing(memory_client: MemoryClient) -> None:
    memory_client.timing("test.timing", 500)
    assert memory_client.get_memory()["test.timing"] == [500]


def test_memory_client_timer(memory_client: MemoryClient) -> None:
    with Statsd(memory_client).timer("test.timer"):
        pass

    timings = memory_client.get_memory()["test.timer"]
    assert len(timings) == 1
    assert timings[0] >= 0


def test_memory_client_incr(memory_client: MemoryClient) -> None:
    memory_client.incr("test.counter")
    memory_client.incr("test.counter", 2)
    assert memory_client.get_memory() == {"test.counter": 3}


def test_memory_client_prefix() -> None:
    client = MemoryClient(prefix="registry_sync")
    client.incr("submission.started")
    assert client.get_memory() == {"registry_sync.submission.started": 1}


def test_setup_stats_disabled_should_be_noop() -> None:
    stats = setup_stats(ConfigStats(enabled=False))
    assert isinstance(stats, NoopStats)
    with stats.timer("anything"):
        pass


def test_statsd_middleware() -> None:
    setup_stats(ConfigStats(enabled=True, host=None, port=None, module_name="test_module"))

    app = FastAPI()

    @app.get("/test")
    async def test_endpoint() -> dict[str, str]:
        return {"message": "ok"}

    app.add_middleware(StatsdMiddleware, module_name="test_module")
    client = TestClient(app)

    response = client.get("/test")
    assert response.status_code == 200

    stats = get_stats()
    assert isinstance(stats, Statsd)
    memory = stats.client.get_memory()  # type: ignore[union-attr]
    assert memory["test_module.test_module.http.request.get./test"] == 1
    assert "test_module.test_module.http.response_time" in memory
    setup_stats(ConfigStats(enabled=False))
