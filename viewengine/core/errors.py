"""
Client errors for the ViewEngine API.

Low-level errors (TransportError, HttpStatusError, DecodeError) describe what
went wrong on the wire. Each client operation wraps them in its own step error
(ToolDiscoveryError, SubmissionError, FetchError) so the CLI can report which
step failed. PollTimeoutError is raised when polling runs out of attempts.
"""


class ViewEngineError(Exception):
    """Base class for every error raised by the ViewEngine client."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class TransportError(ViewEngineError):
    """Raised when the request never got a response (DNS, connect, timeout)."""


class HttpStatusError(ViewEngineError):
    """Raised when the service answered with a non-200 status."""

    def __init__(self, status_code: int, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"HTTP {status_code}")


class DecodeError(ViewEngineError):
    """Raised when a response body is not JSON or lacks expected fields."""


class _StepError(ViewEngineError):
    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class ToolDiscoveryError(_StepError):
    """Raised when GET /v1/mcp/tools fails."""


class SubmissionError(_StepError):
    """Raised when POST /v1/mcp/retrieve fails. `body` is the raw response text."""


class FetchError(_StepError):
    """Raised when downloading page data from pageDataUrl fails."""


class PollTimeoutError(ViewEngineError):
    """Raised when a job did not reach a terminal status within the attempt budget."""

    def __init__(self, request_id: str, attempts: int) -> None:
        self.request_id = request_id
        self.attempts = attempts
        super().__init__(
            f"Maximum polling attempts reached ({attempts}) for request {request_id}"
        )
