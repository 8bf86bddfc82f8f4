"""Error taxonomy shared by the scorers, the store and the runners."""

from __future__ import annotations

from typing import Any, Optional


class BrandIntelligenceError(Exception):
    """Base error carrying a stable code and structured details."""

    default_code = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "code": self.code, "details": self.details}


class ValidationError(BrandIntelligenceError):
    """Missing or malformed input, e.g. no content to analyze."""

    default_code = "VALIDATION_ERROR"


class AnalysisError(BrandIntelligenceError):
    """Sentiment, authority or extraction computation failed."""

    default_code = "ANALYSIS_ERROR"


class NotFoundError(BrandIntelligenceError):
    """A mention or citation lookup missed."""

    default_code = "NOT_FOUND"


class RunnerError(BrandIntelligenceError):
    """Uncaught failure inside a runner, normalized by the orchestrator."""

    default_code = "RUNNER_ERROR"


class PersistenceError(BrandIntelligenceError):
    """Store failure. Not retried at this layer."""

    default_code = "PERSISTENCE_ERROR"


class ProviderError(BrandIntelligenceError):
    """Language-model provider call failed."""

    default_code = "PROVIDER_ERROR"
