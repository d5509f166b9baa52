from __future__ import annotations

import logging

import pytest

from breeding_advisor.bootstrap import create_advisor
from breeding_advisor.config.settings import Settings
from breeding_advisor.infrastructure.history.json_file_store import JsonFileHistoryStore
from breeding_advisor.infrastructure.history.memory_store import InMemoryHistoryStore
from breeding_advisor.infrastructure.services.openai_advisory import OpenAIAdvisoryProvider


def make_settings(**overrides) -> Settings:
    values = {
        "log_level": "INFO",
        "environment": "test",
        "openai_api_key": None,
        "history_path": None,
    }
    values.update(overrides)
    return Settings.model_validate(values)


def test_no_api_key_means_rules_only():
    advisor = create_advisor(make_settings())

    assert advisor.provider is None
    assert isinstance(advisor.history, InMemoryHistoryStore)


def test_blank_api_key_is_not_configured():
    settings = make_settings(openai_api_key="   ")

    assert settings.advisory_enabled is False
    assert create_advisor(settings).provider is None


def test_api_key_enables_openai_provider(tmp_path):
    settings = make_settings(
        openai_api_key="sk-test",
        advisory_model="gpt-test",
        advisory_timeout_seconds=3,
        history_path=str(tmp_path / "ai-history.json"),
        history_capacity=25,
    )

    advisor = create_advisor(settings)

    assert isinstance(advisor.provider, OpenAIAdvisoryProvider)
    assert advisor.provider.model == "gpt-test"
    assert advisor.timeout_seconds == 3
    assert isinstance(advisor.history, JsonFileHistoryStore)
    assert advisor.history.capacity == 25


def test_injected_collaborators_win():
    history = InMemoryHistoryStore()
    sentinel = object()

    advisor = create_advisor(make_settings(), provider=sentinel, history=history)

    assert advisor.provider is sentinel
    assert advisor.history is history


def test_blank_history_path_means_in_memory():
    assert make_settings(history_path="  ").history_path is None


@pytest.mark.parametrize("capacity", [0, 5000])
def test_history_capacity_is_bounded(capacity):
    with pytest.raises(ValueError):
        make_settings(history_capacity=capacity)


def test_environment_is_logged(caplog):
    with caplog.at_level(logging.INFO, logger="breeding_advisor.bootstrap"):
        create_advisor(make_settings(environment="staging"))

    assert "environment=staging" in caplog.text
