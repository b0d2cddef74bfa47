import logging

import pytest

from calgrid.core.env import get_required_env, load_env
from calgrid.logging import configure_logging


def test_load_env_does_not_fail_when_missing() -> None:
    load_env()


def test_get_required_env(monkeypatch) -> None:
    monkeypatch.setenv("CALGRID_TEST_VALUE", "x")
    assert get_required_env("CALGRID_TEST_VALUE") == "x"

    monkeypatch.delenv("CALGRID_TEST_VALUE")
    with pytest.raises(ValueError, match="CALGRID_TEST_VALUE"):
        get_required_env("CALGRID_TEST_VALUE")


def test_configure_logging_quiets_noisy_libraries() -> None:
    configure_logging("debug")
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
