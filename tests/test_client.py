"""Tests for the publish client."""

from urllib.parse import parse_qs

import httpx
import pytest
from conftest import ENDPOINT, RecordingEndpoint

from notesend.publisher import (
    FailureKind,
    PublishClient,
    build_endpoint_url,
    interpret_response,
)


class TestBuildEndpointUrl:
    def test_adds_trailing_slash(self):
        assert build_endpoint_url("https://x.com/iwh/abc") == "https://x.com/iwh/abc/"

    def test_keeps_existing_query(self):
        url = "https://x.com/api?token=abc"
        assert build_endpoint_url(url) == url

    def test_appends_token_with_question_mark(self):
        assert build_endpoint_url("https://x.com/api/", "t0k") == "https://x.com/api/?token=t0k"

    def test_appends_token_with_ampersand(self):
        url = build_endpoint_url("https://x.com/api?user=1", "t0k")
        assert url == "https://x.com/api?user=1&token=t0k"

    def test_strips_whitespace(self):
        assert build_endpoint_url("  https://x.com/a/  ") == "https://x.com/a/"

    def test_empty(self):
        assert build_endpoint_url("   ", "t0k") == ""


class TestInterpretResponse:
    """Tests for turning responses into verdicts."""

    def test_code_zero_is_success(self):
        assert interpret_response(200, '{"code":0}').success is True

    def test_code_one_is_rejected(self):
        result = interpret_response(200, '{"code":1}')
        assert result.success is False
        assert result.failure == FailureKind.REJECTED

    def test_rejection_includes_endpoint_message(self):
        result = interpret_response(200, '{"code": -1, "message": "token invalid"}')
        assert "token invalid" in result.message

    def test_json_without_code_is_rejected(self):
        assert interpret_response(200, '{"ok": true}').success is False

    @pytest.mark.parametrize("body", ['{"code": false}', '{"code": "0"}', '{"code": null}', "[0]"])
    def test_code_must_be_numeric_zero(self, body: str):
        result = interpret_response(200, body)
        assert result.success is False
        assert result.failure == FailureKind.REJECTED

    def test_float_zero_code_is_success(self):
        assert interpret_response(200, '{"code": 0.0}').success is True

    def test_null_body_is_trusted(self):
        assert interpret_response(200, "null").success is True

    def test_empty_body_is_success(self):
        assert interpret_response(200, "").success is True

    def test_unparseable_body_is_trusted(self):
        # The endpoint sometimes answers 200 with HTML. This optimistic rule can
        # hide a silent failure; it is kept because the endpoint is inconsistent.
        result = interpret_response(200, "<html>ok</html>")
        assert result.success is True

    @pytest.mark.parametrize(
        "status,kind",
        [
            (404, FailureKind.NOT_FOUND),
            (401, FailureKind.UNAUTHORIZED),
            (403, FailureKind.UNAUTHORIZED),
            (500, FailureKind.HTTP_ERROR),
            (302, FailureKind.HTTP_ERROR),
        ],
    )
    def test_http_failures(self, status: int, kind: FailureKind):
        result = interpret_response(status, '{"code":0}')
        assert result.success is False
        assert result.failure == kind
        assert result.status_code == status

    def test_http_error_message_has_status(self):
        assert "500" in interpret_response(500, "").message


class TestPublishClient:
    """Tests for PublishClient.send."""

    @pytest.mark.asyncio
    async def test_sends_form_encoded_content(self, endpoint: RecordingEndpoint):
        client = PublishClient(ENDPOINT, transport=endpoint.transport)
        result = await client.send("Hello & welcome\n#tag")

        assert result.success is True
        assert len(endpoint.requests) == 1

        request = endpoint.requests[0]
        assert request.method == "POST"
        assert str(request.url) == ENDPOINT
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        assert "cookie" not in request.headers
        assert parse_qs(request.content.decode()) == {"content": ["Hello & welcome\n#tag"]}

    @pytest.mark.asyncio
    async def test_appends_token(self, endpoint: RecordingEndpoint):
        client = PublishClient("https://x.com/api", token="secret", transport=endpoint.transport)
        await client.send("hi")

        assert endpoint.requests[0].url.params["token"] == "secret"

    @pytest.mark.asyncio
    async def test_rejected_by_endpoint(self):
        fake = RecordingEndpoint(lambda r: httpx.Response(200, json={"code": 1}))
        client = PublishClient(ENDPOINT, transport=fake.transport)

        result = await client.send("hi")
        assert result.success is False
        assert result.failure == FailureKind.REJECTED

    @pytest.mark.asyncio
    async def test_empty_endpoint_does_not_send(self, endpoint: RecordingEndpoint):
        client = PublishClient("", transport=endpoint.transport)

        result = await client.send("hi")
        assert result.success is False
        assert result.failure == FailureKind.NOT_CONFIGURED
        assert endpoint.requests == []

    @pytest.mark.asyncio
    async def test_transport_error_returns_false(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        client = PublishClient(ENDPOINT, transport=httpx.MockTransport(refuse))

        result = await client.send("hi")
        assert result.success is False
        assert result.failure == FailureKind.TRANSPORT_ERROR
        assert "Connection refused" in result.message

    @pytest.mark.asyncio
    async def test_timeout_returns_false(self):
        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = PublishClient(ENDPOINT, transport=httpx.MockTransport(slow))
        assert (await client.send("hi")).success is False

    @pytest.mark.asyncio
    async def test_not_found(self):
        fake = RecordingEndpoint(lambda r: httpx.Response(404, text="missing"))
        client = PublishClient(ENDPOINT, transport=fake.transport)

        result = await client.send("hi")
        assert result.failure == FailureKind.NOT_FOUND
