"""
Unit tests for the HTTP client and HTTP-backed sources.

Uses httpx.MockTransport so no network is touched.

Tests cover:
- List envelope unwrapping and record parsing
- HTTP status -> error kind mapping
- GET retries for network/server faults only
- POST/DELETE never retried
- Bearer authentication header
"""

import asyncio
import json

import httpx
import pytest

from txn_engine.config.settings import Settings
from txn_engine.core.exceptions import (
    ErrorKind,
    NetworkError,
    NotFoundError,
    ServerError,
    UnknownError,
    ValidationError,
)
from txn_engine.domain.models import CreatePurchaseData
from txn_engine.providers import ApiClient, HttpProductSource, HttpTransactionSource


BASE_URL = "https://store.test/api"

PURCHASE_ROW = {"id": 1, "product": 10, "buyer": 2, "seller": 3, "purchase_date": "2024-01-01"}


class Recorder:
    """MockTransport handler replaying queued responses and recording requests."""

    def __init__(self, *responses):
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def _client(handler, retry_attempts: int = 3, token=None) -> ApiClient:
    return ApiClient(
        base_url=BASE_URL,
        token=token,
        retry_attempts=retry_attempts,
        retry_delay=0,
        transport=httpx.MockTransport(handler),
    )


def _run_list(handler, **kwargs):
    async def scenario():
        async with _client(handler, **kwargs) as client:
            return await HttpTransactionSource(client).list_purchases()

    return asyncio.run(scenario())


# =============================================================================
# LIST / DETAIL PARSING TESTS
# =============================================================================


class TestParsing:
    """Tests for response unwrapping."""

    @pytest.mark.parametrize(
        "body",
        [
            [PURCHASE_ROW],
            {"data": [PURCHASE_ROW]},
            {"results": [PURCHASE_ROW], "count": 1, "next": None},
        ],
    )
    def test_list_shapes(self, body):
        records = _run_list(Recorder(httpx.Response(200, json=body)))

        assert len(records) == 1
        assert records[0].product_id == 10
        assert records[0].buyer_id == 2

    def test_envelope_without_rows_is_empty(self):
        assert _run_list(Recorder(httpx.Response(200, json={"data": None}))) == []

    def test_empty_body_is_empty(self):
        assert _run_list(Recorder(httpx.Response(200))) == []

    def test_unexpected_list_type_is_unknown_error(self):
        with pytest.raises(UnknownError):
            _run_list(Recorder(httpx.Response(200, json="nope")))

    def test_malformed_row_is_unknown_error(self):
        with pytest.raises(UnknownError):
            _run_list(Recorder(httpx.Response(200, json=[{"id": 1}])))

    def test_extra_fields_are_tolerated(self):
        row = dict(PURCHASE_ROW, shipping="express")

        [record] = _run_list(Recorder(httpx.Response(200, json=[row])))

        assert record.model_extra["shipping"] == "express"

    def test_detail_paths(self):
        recorder = Recorder(
            httpx.Response(200, json={"data": PURCHASE_ROW}),
            httpx.Response(200, json={"id": 10, "title": "Cordless Drill", "purchase_price": "89.99"}),
        )

        async def scenario():
            async with _client(recorder) as client:
                record = await HttpTransactionSource(client).get_purchase("1")
                product = await HttpProductSource(client).get_product("10")
                return record, product

        record, product = asyncio.run(scenario())

        assert [r.url.path for r in recorder.requests] == ["/api/purchases/1/", "/api/products/10/"]
        assert record.id == 1
        assert product.purchase_price == "89.99"

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200),
            httpx.Response(200, json=None),
            httpx.Response(200, json={"data": None}),
            httpx.Response(200, json={}),
        ],
    )
    def test_empty_detail_body_is_none(self, response):
        recorder = Recorder(response)

        async def scenario():
            async with _client(recorder) as client:
                rental = await HttpTransactionSource(client).get_rental("1")
                product = await HttpProductSource(client).get_product("10")
                return rental, product

        assert asyncio.run(scenario()) == (None, None)


# =============================================================================
# ERROR MAPPING TESTS
# =============================================================================


class TestErrorMapping:
    """Tests for status and transport failures."""

    @pytest.mark.parametrize(
        "status,error_type,kind",
        [
            (404, NotFoundError, ErrorKind.NOT_FOUND),
            (400, ValidationError, ErrorKind.VALIDATION),
            (422, ValidationError, ErrorKind.VALIDATION),
            (500, ServerError, ErrorKind.SERVER),
            (503, ServerError, ErrorKind.SERVER),
            (403, UnknownError, ErrorKind.UNKNOWN),
        ],
    )
    def test_status_mapping(self, status, error_type, kind):
        recorder = Recorder(httpx.Response(status, json={"detail": "nope"}))

        async def scenario():
            async with _client(recorder, retry_attempts=0) as client:
                await HttpTransactionSource(client).get_rental("7")

        with pytest.raises(error_type) as exc_info:
            asyncio.run(scenario())

        assert exc_info.value.kind == kind

    def test_not_found_names_resource(self):
        recorder = Recorder(httpx.Response(404))

        async def scenario():
            async with _client(recorder) as client:
                await HttpProductSource(client).get_product("42")

        with pytest.raises(NotFoundError) as exc_info:
            asyncio.run(scenario())

        assert "42" in exc_info.value.message

    def test_timeout_is_network_error(self):
        recorder = Recorder(httpx.ConnectTimeout("timed out"))

        with pytest.raises(NetworkError):
            _run_list(recorder, retry_attempts=0)

    def test_connection_failure_is_network_error(self):
        recorder = Recorder(httpx.ConnectError("refused"))

        with pytest.raises(NetworkError):
            _run_list(recorder, retry_attempts=0)


# =============================================================================
# RETRY TESTS
# =============================================================================


class TestRetries:
    """Tests for the GET retry policy."""

    def test_get_retries_server_errors(self):
        """
        GIVEN two 503 responses followed by a 200
        WHEN I list purchases
        THEN the request is retried and the list is returned
        """
        recorder = Recorder(
            httpx.Response(503),
            httpx.Response(503),
            httpx.Response(200, json=[PURCHASE_ROW]),
        )

        records = _run_list(recorder)

        assert len(records) == 1
        assert len(recorder.requests) == 3

    def test_get_retries_network_errors(self):
        recorder = Recorder(httpx.ConnectError("refused"), httpx.Response(200, json=[]))

        assert _run_list(recorder) == []
        assert len(recorder.requests) == 2

    def test_get_gives_up_after_attempts(self):
        recorder = Recorder(httpx.Response(500))

        with pytest.raises(ServerError):
            _run_list(recorder, retry_attempts=2)

        assert len(recorder.requests) == 3

    def test_client_errors_are_not_retried(self):
        recorder = Recorder(httpx.Response(404))

        async def scenario():
            async with _client(recorder) as client:
                await HttpTransactionSource(client).get_purchase("9")

        with pytest.raises(NotFoundError):
            asyncio.run(scenario())

        assert len(recorder.requests) == 1

    def test_post_is_not_retried(self):
        recorder = Recorder(httpx.Response(500))

        async def scenario():
            async with _client(recorder) as client:
                await HttpTransactionSource(client).create_purchase(
                    CreatePurchaseData(buyer=2, product=10)
                )

        with pytest.raises(ServerError):
            asyncio.run(scenario())

        assert len(recorder.requests) == 1

    def test_delete_is_not_retried(self):
        recorder = Recorder(httpx.ConnectError("refused"))

        async def scenario():
            async with _client(recorder) as client:
                await HttpTransactionSource(client).delete_rental("1")

        with pytest.raises(NetworkError):
            asyncio.run(scenario())

        assert len(recorder.requests) == 1


# =============================================================================
# MUTATION REQUEST TESTS
# =============================================================================


class TestMutationRequests:
    """Tests for POST/DELETE request shape."""

    def test_create_posts_json_payload(self):
        recorder = Recorder(httpx.Response(201, json=dict(PURCHASE_ROW, id=5)))

        async def scenario():
            async with _client(recorder) as client:
                return await HttpTransactionSource(client).create_purchase(
                    CreatePurchaseData(buyer=2, product=10)
                )

        record = asyncio.run(scenario())

        [request] = recorder.requests
        assert request.method == "POST"
        assert request.url.path == "/api/purchases/"
        assert json.loads(request.content) == {"buyer": 2, "product": 10}
        assert record.id == 5

    def test_delete_accepts_no_content(self):
        recorder = Recorder(httpx.Response(204))

        async def scenario():
            async with _client(recorder) as client:
                return await HttpTransactionSource(client).delete_purchase("5")

        assert asyncio.run(scenario()) is None
        assert recorder.requests[0].method == "DELETE"
        assert recorder.requests[0].url.path == "/api/purchases/5/"

    def test_bearer_token_is_sent(self):
        recorder = Recorder(httpx.Response(200, json=[]))

        _run_list(recorder, token="secret-token")

        assert recorder.requests[0].headers["Authorization"] == "Bearer secret-token"

    def test_no_token_no_authorization_header(self):
        recorder = Recorder(httpx.Response(200, json=[]))

        _run_list(recorder)

        assert "Authorization" not in recorder.requests[0].headers


# =============================================================================
# CONFIGURATION TESTS
# =============================================================================


class TestFromSettings:
    """Tests for building the client from Settings."""

    def test_requires_base_url(self):
        with pytest.raises(ValueError):
            ApiClient.from_settings(Settings(api_base_url=None))

    def test_uses_settings(self):
        recorder = Recorder(httpx.Response(200, json=[]))
        settings = Settings(api_base_url=BASE_URL, api_token="t", retry_attempts=0)

        async def scenario():
            async with ApiClient.from_settings(settings, transport=httpx.MockTransport(recorder)) as client:
                await HttpTransactionSource(client).list_rentals()

        asyncio.run(scenario())

        assert recorder.requests[0].url.path == "/api/rentals/"
        assert recorder.requests[0].headers["Authorization"] == "Bearer t"
