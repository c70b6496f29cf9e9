"""
ViewEngine retrieval client: tool discovery, job submission, polling, page data download.

Responsibility: All HTTP interaction with the ViewEngine MCP endpoints. Every call
is independent and authenticated with the X-API-Key header. No console I/O here;
the CLI renders results and errors.
"""

import logging
import time
from typing import Any, Callable
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from viewengine.core.config import (
    API_BASE_URL,
    HTTP_TIMEOUT_SECONDS,
    POLL_INTERVAL_SECONDS,
    POLL_MAX_ATTEMPTS,
    RETRIEVAL_TIMEOUT_SECONDS,
)
from viewengine.core.errors import (
    DecodeError,
    FetchError,
    HttpStatusError,
    PollTimeoutError,
    SubmissionError,
    ToolDiscoveryError,
    TransportError,
    ViewEngineError,
)
from viewengine.schemas.retrieval import (
    RetrievalAck,
    RetrievalRequest,
    RetrievalResult,
    ToolDescriptor,
)

logger = logging.getLogger(__name__)

TOOLS_PATH = "/v1/mcp/tools"
RETRIEVE_PATH = "/v1/mcp/retrieve"

# on_attempt(attempt, max_attempts, result, error): exactly one of result / error is set
AttemptCallback = Callable[[int, int, RetrievalResult | None, ViewEngineError | None], None]


class RetrievalClient:
    """Synchronous client for the ViewEngine MCP REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = API_BASE_URL,
        http_client: httpx.Client | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValueError("api_key is required")
        self.api_key = api_key.strip()
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=HTTP_TIMEOUT_SECONDS)
        self._sleep = sleep

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "RetrievalClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # --- transport ---

    def _headers(self, json_body: bool = False) -> dict[str, str]:
        headers = {"X-API-Key": self.api_key}
        if json_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _request(self, method: str, url: str, body: dict[str, Any] | None = None) -> Any:
        """
        Send one request and return the decoded JSON body.
        Raises TransportError, HttpStatusError (non-200) or DecodeError.
        """
        try:
            if body is None:
                response = self._client.request(method, url, headers=self._headers())
            else:
                response = self._client.request(method, url, json=body, headers=self._headers(json_body=True))
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        if response.status_code != 200:
            raise HttpStatusError(response.status_code, response.text)
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"{method} {url} returned invalid JSON: {e}") from e

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    # --- operations ---

    def list_tools(self) -> list[ToolDescriptor]:
        """
        GET /v1/mcp/tools. An empty or missing "tools" field means no tools are
        available and returns []. Any failure raises ToolDiscoveryError.
        """
        logger.info("[client:list_tools] IN  base_url=%s", self.base_url)
        try:
            data = self._request("GET", self._url(TOOLS_PATH))
        except HttpStatusError as e:
            raise ToolDiscoveryError(
                f"Error getting tools: HTTP {e.status_code}", status_code=e.status_code, body=e.body
            ) from e
        except ViewEngineError as e:
            raise ToolDiscoveryError(f"Error getting tools: {e.message}") from e

        raw_tools = data.get("tools") if isinstance(data, dict) else None
        try:
            tools = [ToolDescriptor.model_validate(t) for t in raw_tools or []]
        except ValidationError as e:
            raise ToolDiscoveryError(f"Error getting tools: unexpected tool entry: {e}") from e
        logger.info("[client:list_tools] OUT tools=%s", [t.name for t in tools])
        return tools

    def submit_retrieval(self, request: RetrievalRequest) -> RetrievalAck:
        """
        POST /v1/mcp/retrieve. timeoutSeconds is always sent as 60.
        Non-200 raises SubmissionError with the raw response body.
        """
        payload = request.model_dump(by_alias=True)
        payload["timeoutSeconds"] = RETRIEVAL_TIMEOUT_SECONDS
        logger.info("[client:submit_retrieval] IN  payload=%r", payload)
        try:
            data = self._request("POST", self._url(RETRIEVE_PATH), body=payload)
            ack = RetrievalAck.model_validate(data)
        except HttpStatusError as e:
            raise SubmissionError(
                f"API Error ({e.status_code}): {e.body}", status_code=e.status_code, body=e.body
            ) from e
        except ValidationError as e:
            raise SubmissionError(f"Unexpected retrieval response: {e}") from e
        except ViewEngineError as e:
            raise SubmissionError(f"Error submitting retrieval request: {e.message}") from e
        logger.info(
            "[client:submit_retrieval] OUT request_id=%s status=%s estimated_wait=%ss",
            ack.request_id, ack.status, ack.estimated_wait_time_seconds,
        )
        return ack

    def get_retrieval(self, request_id: str) -> RetrievalResult:
        """Single GET /v1/mcp/retrieve/{request_id}. Raises low-level errors unchanged."""
        data = self._request("GET", self._url(f"{RETRIEVE_PATH}/{quote(request_id, safe='')}"))
        try:
            return RetrievalResult.model_validate(data)
        except ValidationError as e:
            raise DecodeError(f"Failed to decode response: {e}") from e

    def poll_retrieval(
        self,
        request_id: str,
        max_attempts: int = POLL_MAX_ATTEMPTS,
        interval_seconds: float = POLL_INTERVAL_SECONDS,
        on_attempt: AttemptCallback | None = None,
    ) -> RetrievalResult:
        """
        Poll until the job reaches complete, failed or canceled, sleeping
        interval_seconds after every non-terminal attempt. Per-attempt errors are
        logged and the loop continues. Raises PollTimeoutError when max_attempts
        is exhausted.
        """
        logger.info("[client:poll_retrieval] IN  request_id=%s max_attempts=%d", request_id, max_attempts)
        for attempt in range(1, max_attempts + 1):
            try:
                result = self.get_retrieval(request_id)
            except ViewEngineError as e:
                logger.warning("[client:poll_retrieval] [%d/%d] %s", attempt, max_attempts, e.message)
                if on_attempt:
                    on_attempt(attempt, max_attempts, None, e)
                self._sleep(interval_seconds)
                continue

            logger.info(
                "[client:poll_retrieval] [%d/%d] status=%s message=%r",
                attempt, max_attempts, result.status, result.message,
            )
            if on_attempt:
                on_attempt(attempt, max_attempts, result, None)
            if result.is_terminal:
                logger.info("[client:poll_retrieval] OUT status=%s attempts=%d", result.status, attempt)
                return result
            self._sleep(interval_seconds)

        logger.warning("[client:poll_retrieval] OUT timeout request_id=%s", request_id)
        raise PollTimeoutError(request_id, max_attempts)

    def fetch_content(self, page_data_url: str) -> Any:
        """
        GET the page data document at the absolute page_data_url returned by the
        service. The document is returned decoded but otherwise uninterpreted.
        """
        logger.info("[client:fetch_content] IN  url=%s", page_data_url)
        try:
            document = self._request("GET", page_data_url)
        except HttpStatusError as e:
            raise FetchError(
                f"Error downloading page data: HTTP {e.status_code}",
                status_code=e.status_code,
                body=e.body,
            ) from e
        except ViewEngineError as e:
            raise FetchError(f"Error downloading page data: {e.message}") from e
        logger.info("[client:fetch_content] OUT type=%s", type(document).__name__)
        return document
