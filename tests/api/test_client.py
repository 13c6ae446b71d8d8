"""Tests for the listing API client."""

import httpx
import pytest

from typeahead.api.client import ApiClient, response_status, user_message
from typeahead.core.errors import SOME_ISSUE_WITH_RESPONSE, ApiError

BASE_URL = "https://api.test/"


def _client(handler):
    return ApiClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


def test_response_status_prefers_body_markers():
    assert response_status(200, {"data": {"error": "E1"}}) == (False, "E1")
    assert response_status(200, {"errorData": {"errorReason": "nope"}}) == (False, "nope")
    assert response_status(200, {"status": "success"}) == (True, "success")
    assert response_status(200, {"status": "failed"}) == (False, "failed")
    assert response_status(204, [1, 2]) == (True, 204)
    assert response_status(404, None) == (False, 404)


def test_user_message_lookup_order():
    assert user_message({"msg": "m", "cause": {"name": "c"}}) == "m"
    assert user_message({"errorData": {"errorReason": "r"}}) == "r"
    assert user_message({"cause": {"name": "TimeoutError"}}) == "TimeoutError"
    assert user_message({"data": {"message": "d"}}) == "d"
    assert user_message({}) == SOME_ISSUE_WITH_RESPONSE
    assert user_message(None) == SOME_ISSUE_WITH_RESPONSE


@pytest.mark.asyncio
async def test_get_returns_decoded_body():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        return httpx.Response(200, json=[{"id": 1}])

    async with _client(handler) as client:
        assert await client.get("/users", params={"q": "le"}) == [{"id": 1}]
    assert seen["url"] == "https://api.test/users?q=le"


@pytest.mark.asyncio
async def test_network_error_is_classified():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.get("/users")
    assert excinfo.value.status_text == "Network Error"


@pytest.mark.asyncio
async def test_unauthorised_response():
    async with _client(lambda r: httpx.Response(401, json={"msg": "token expired"})) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.get("/users")
    assert excinfo.value.status_text == "UNAUTHORISED"
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_failure_response_carries_user_message():
    async with _client(lambda r: httpx.Response(404, json={"msg": "No such route"})) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.get("/missing")
    assert excinfo.value.status_text == "error_from_api_failure_handler"
    assert excinfo.value.user_message == "No such route"


@pytest.mark.asyncio
async def test_error_status_with_success_body_is_unexpected():
    async with _client(lambda r: httpx.Response(500, json={"status": "success"})) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.get("/users")
    assert excinfo.value.status_text == "unexpected_error"


@pytest.mark.asyncio
async def test_ok_status_with_failed_body():
    body = {"status": "failed", "errorData": {"errorReason": "quota"}}
    async with _client(lambda r: httpx.Response(200, json=body)) as client:
        with pytest.raises(ApiError) as excinfo:
            await client.get("/users")
    assert excinfo.value.status_text == "failed"
    assert excinfo.value.user_message == "quota"

