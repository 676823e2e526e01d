import pytest

from lognorm.config import Config


@pytest.fixture
def config(monkeypatch):
    monkeypatch.delenv("LOGNORM_CONFIG", raising=False)
    return Config()


@pytest.fixture
def mixed_content():
    return "\n".join([
        '{"level":"warn","message":"disk low","dt":"2024-01-01T00:00:00Z"}',
        "[2024-01-01 10:00:00] [ERROR] connection refused",
        "09/Jan/2026:20:52:09 WARN disk at 90%",
        "",
        "   ",
        "2024-01-01 12:00:00.250 [DEBUG] cache refreshed",
    ])
