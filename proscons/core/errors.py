from __future__ import annotations

from typing import Any, Optional


class AnalysisError(RuntimeError):
    """Base for every failure the analysis endpoint reports to its caller."""

    status_code: int = 500
    message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or type(self).message
        self.details = details
        super().__init__(self.message)

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class BadRequest(AnalysisError):
    status_code = 400
    message = "Topic is required"


class MethodNotAllowed(AnalysisError):
    status_code = 405
    message = "Method not allowed"


class ServerMisconfigured(AnalysisError):
    status_code = 500
    message = "No LLM provider API key is configured"


class UpstreamHTTPError(AnalysisError):
    """A provider answered non-2xx. Recorded and skipped inside the fallback loop."""

    status_code = 502

    def __init__(self, provider: str, status: int, body: str):
        self.provider = provider
        self.status = status
        self.body = body
        super().__init__(f"{provider} error: {status} - {body}")


class UpstreamProtocolError(AnalysisError):
    status_code = 502
    message = "Unexpected response from AI provider"


class ResponseParseError(AnalysisError):
    status_code = 500
    message = "Failed to parse AI response as JSON"


class AllProvidersFailed(AnalysisError):
    status_code = 502
    message = "All AI models failed to respond. Please check API quotas."
