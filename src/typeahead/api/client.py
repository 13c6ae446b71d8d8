"""
Async HTTP client for the listing API.
Why: one place that decides what counts as success and what the user sees on failure.
"""

from typing import Any, Dict, Optional, Tuple

import httpx

from typeahead.config.settings import settings
from typeahead.core.errors import SOME_ISSUE_WITH_RESPONSE, ApiError
from typeahead.core.logging import get_logger

logger = get_logger(__name__)

RESPONSE_STATUS_SUCCESS = "success"
RESPONSE_STATUS_FAILED = "failed"
API_NETWORK_ERROR = "Network Error"
UNAUTHORISED_API = "UNAUTHORISED"
FAILURE_RESPONSE_ERROR = "error_from_api_failure_handler"
UNEXPECTED_API_ERROR = "unexpected_error"
RESPONSE_CODE_401 = 401


def response_status(status_code: int, body: Any) -> Tuple[bool, Any]:
    """Classify a response as ``(is_success, status)``.

    Error markers inside the body win over the HTTP status code.
    """
    if isinstance(body, dict):
        data = body.get("data")
        if isinstance(data, dict) and data.get("error"):
            return False, data["error"]
        error_data = body.get("errorData")
        if error_data:
            reason = error_data.get("errorReason") if isinstance(error_data, dict) else error_data
            return False, reason
        if body.get("status"):
            return body["status"] == RESPONSE_STATUS_SUCCESS, body["status"]
    return 200 <= status_code < 300, status_code


def user_message(body: Any) -> str:
    if not isinstance(body, dict):
        return SOME_ISSUE_WITH_RESPONSE
    if body.get("msg"):
        return str(body["msg"])
    error_data = body.get("errorData")
    if isinstance(error_data, dict) and error_data.get("errorReason"):
        return str(error_data["errorReason"])
    cause = body.get("cause")
    if isinstance(cause, dict) and cause.get("name"):
        return str(cause["name"])
    data = body.get("data")
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return SOME_ISSUE_WITH_RESPONSE


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


class ApiClient:
    """Thin wrapper over ``httpx.AsyncClient`` that classifies every response."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._http = httpx.AsyncClient(
            base_url=base_url or settings.api.base_url,
            timeout=timeout if timeout is not None else settings.api.timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get(self, route: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", route, params=params)

    async def request(self, method: str, route: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded body of a successful response.

        Raises:
            ApiError: transport failure, non-2xx status, or a 2xx body that
                reports failure.
        """
        try:
            response = await self._http.request(method, route, **kwargs)
        except httpx.TransportError as exc:
            logger.warning(f"{method} {route} network error: {exc!r}")
            raise ApiError(API_NETWORK_ERROR) from exc

        body = _decode(response)
        logger.debug(f"{method} {response.request.url} status={response.status_code}")
        is_success, status = response_status(response.status_code, body)

        if not response.is_success:
            if response.status_code == RESPONSE_CODE_401 or status == RESPONSE_CODE_401:
                raise ApiError(UNAUTHORISED_API, status_code=response.status_code)
            if is_success:
                raise ApiError(UNEXPECTED_API_ERROR, status_code=response.status_code)
            raise ApiError(
                FAILURE_RESPONSE_ERROR, user_message(body), status_code=response.status_code
            )
        if not is_success:
            raise ApiError(RESPONSE_STATUS_FAILED, user_message(body), status_code=response.status_code)
        return body
