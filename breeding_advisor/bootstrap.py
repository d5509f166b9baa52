from __future__ import annotations

import logging

from breeding_advisor.application.interfaces.advisory_provider import AdvisoryProvider
from breeding_advisor.application.interfaces.history_store import HistoryStore
from breeding_advisor.application.services.compatibility_advisor import CompatibilityAdvisor
from breeding_advisor.config.settings import Settings, get_settings
from breeding_advisor.infrastructure.history.json_file_store import JsonFileHistoryStore
from breeding_advisor.infrastructure.history.memory_store import InMemoryHistoryStore

logger = logging.getLogger(__name__)


def _configure_logging(level_name: str) -> None:
    level = getattr(logging, level_name.upper(), logging.INFO)
    root = logging.getLogger()
    # Avoid adding duplicate handlers when called more than once
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(level)
    # Align common libraries
    for name in ("openai", "httpx"):
        logging.getLogger(name).setLevel(level)


def _create_provider(settings: Settings) -> AdvisoryProvider | None:
    if not settings.advisory_enabled:
        logger.info("Advisory provider not configured - using rule-based advice")
        return None
    from breeding_advisor.infrastructure.services.openai_advisory import OpenAIAdvisoryProvider

    assert settings.openai_api_key is not None
    logger.info("OpenAI advisory provider initialized (model=%s)", settings.advisory_model)
    return OpenAIAdvisoryProvider(
        settings.openai_api_key.get_secret_value(),
        model=settings.advisory_model,
        temperature=settings.advisory_temperature,
        timeout_seconds=settings.advisory_timeout_seconds,
    )


def _create_history(settings: Settings) -> HistoryStore:
    if settings.history_path:
        return JsonFileHistoryStore(settings.history_path, capacity=settings.history_capacity)
    return InMemoryHistoryStore(capacity=settings.history_capacity)


def create_advisor(
    settings: Settings | None = None,
    *,
    provider: AdvisoryProvider | None = None,
    history: HistoryStore | None = None,
) -> CompatibilityAdvisor:
    settings = settings or get_settings()
    _configure_logging(settings.log_level)
    logger.info("Creating compatibility advisor (environment=%s)", settings.environment)
    return CompatibilityAdvisor(
        history=history or _create_history(settings),
        provider=provider or _create_provider(settings),
        timeout_seconds=settings.advisory_timeout_seconds,
    )
