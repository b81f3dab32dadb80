import logging

import pytest

from task_tracker.logging_setup import setup_logging
from task_tracker.settings import get_settings

_VARS = [
    "DATABASE_URL",
    "DB_HOST",
    "DB_PORT",
    "DB_USER",
    "DB_PASSWORD",
    "DB_NAME",
    "DB_POOL_SIZE",
    "CORS_ALLOW_ORIGINS",
    "LOG_LEVEL",
    "HOST",
    "PORT",
]


@pytest.fixture()
def clean_env(monkeypatch):
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        s = get_settings()
        assert s.db_host == "localhost"
        assert s.db_port == 3306
        assert s.db_pool_size == 10
        assert s.cors_allow_origins == ["*"]
        assert s.log_level == "INFO"
        assert s.port == 3000
        assert s.database_url == "mysql+pymysql://root@localhost:3306/task_tracker"

    def test_mysql_url_from_parts(self, clean_env):
        clean_env.setenv("DB_HOST", "db.internal")
        clean_env.setenv("DB_PORT", "3307")
        clean_env.setenv("DB_USER", "app")
        clean_env.setenv("DB_PASSWORD", "p@ss/word")
        clean_env.setenv("DB_NAME", "tasks_db")
        url = get_settings().database_url
        assert url.startswith("mysql+pymysql://app:")
        assert url.endswith("@db.internal:3307/tasks_db")
        # special characters in the password are escaped
        assert "p@ss/word" not in url

    def test_database_url_override_wins(self, clean_env):
        clean_env.setenv("DB_HOST", "ignored")
        clean_env.setenv("DATABASE_URL", "sqlite:///./tasks.db")
        assert get_settings().database_url == "sqlite:///./tasks.db"

    def test_pool_size_parsing(self, clean_env):
        clean_env.setenv("DB_POOL_SIZE", "0")
        assert get_settings().db_pool_size == 1
        clean_env.setenv("DB_POOL_SIZE", "not-a-number")
        assert get_settings().db_pool_size == 10
        clean_env.setenv("DB_POOL_SIZE", "25")
        assert get_settings().db_pool_size == 25

    def test_cors_origins_list(self, clean_env):
        clean_env.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test,")
        assert get_settings().cors_allow_origins == ["http://a.test", "http://b.test"]


class TestLogging:
    def test_setup_logging_does_not_stack_handlers(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging("debug")
            setup_logging("DEBUG")
            assert len(root.handlers) == 1
            assert root.level == logging.DEBUG
            assert logging.getLogger("sqlalchemy").level == logging.WARNING
        finally:
            for h in list(root.handlers):
                root.removeHandler(h)
            for h in saved_handlers:
                root.addHandler(h)
            root.setLevel(saved_level)
            logging.captureWarnings(False)

    def test_unknown_level_falls_back_to_info(self):
        root = logging.getLogger()
        saved_handlers, saved_level = list(root.handlers), root.level
        try:
            setup_logging("chatty")
            assert root.level == logging.INFO
        finally:
            for h in list(root.handlers):
                root.removeHandler(h)
            for h in saved_handlers:
                root.addHandler(h)
            root.setLevel(saved_level)
            logging.captureWarnings(False)
