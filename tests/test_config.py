import pytest

from imagecat import main
from imagecat.catalog.sql_store import SqlImageStore
from imagecat.catalog.store import InMemoryImageStore
from imagecat.config import Settings
from imagecat.main import build_store


def test_defaults():
    settings = Settings.from_env({})
    assert settings.api_tokens == frozenset()
    assert settings.login_url == "/login"
    assert settings.store == "memory"
    assert settings.owner_checked == frozenset({"delete"})
    assert settings.log_level == "INFO"


def test_from_env():
    settings = Settings.from_env(
        {
            "CATALOG_API_TOKENS": "a, b,,",
            "CATALOG_LOGIN_URL": "/auth",
            "CATALOG_STORE": "SQL",
            "CATALOG_DATABASE_URL": "sqlite://",
            "CATALOG_OWNER_CHECKED": "update,Delete",
            "LOG_LEVEL": "debug",
        }
    )
    assert settings.api_tokens == frozenset({"a", "b"})
    assert settings.login_url == "/auth"
    assert settings.store == "sql"
    assert settings.owner_checked == frozenset({"update", "delete"})
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env", [{"CATALOG_STORE": "redis"}, {"CATALOG_OWNER_CHECKED": "list"}]
)
def test_invalid_values_rejected(env):
    with pytest.raises(ValueError):
        Settings.from_env(env)


def test_build_store():
    assert isinstance(build_store(Settings()), InMemoryImageStore)
    assert isinstance(build_store(Settings(store="sql", database_url="sqlite://")), SqlImageStore)


def test_serve_runs_uvicorn_with_factory(monkeypatch):
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("CATALOG_HOST", "0.0.0.0")
    monkeypatch.setenv("CATALOG_PORT", "9001")

    main.serve()

    assert calls == [
        ("imagecat.main:create_app", {"factory": True, "host": "0.0.0.0", "port": 9001})
    ]
