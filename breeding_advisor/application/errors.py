from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    code = "app_error"

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    code = "validation_error"


class InfrastructureError(AppError):
    code = "infrastructure_error"


class AdvisoryProviderError(InfrastructureError):
    code = "advisory_provider_error"


class AdvisoryTransportError(AdvisoryProviderError):
    """Network, timeout or non-2xx failure talking to the advisory provider."""

    code = "advisory_transport_error"


class MalformedAdviceError(AdvisoryProviderError):
    """Provider answered, but not with the expected JSON document."""

    code = "malformed_advice"


class HistoryPersistenceError(InfrastructureError):
    code = "history_persistence_error"
