"""HTTP client for the note-capture endpoint."""

import json
import logging
from dataclasses import dataclass
from enum import Enum

import httpx

from notesend.console import Colors

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class FailureKind(Enum):
    """Why a publish attempt failed."""

    NOT_CONFIGURED = "not_configured"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    REJECTED = "rejected"
    HTTP_ERROR = "http_error"
    TRANSPORT_ERROR = "transport_error"


@dataclass
class PublishResult:
    """Verdict for a single request to the endpoint."""

    success: bool
    status_code: int | None = None
    failure: FailureKind | None = None
    message: str = ""


def build_endpoint_url(endpoint: str, token: str = "") -> str:
    """Normalize the endpoint URL and append a separate access token."""
    url = endpoint.strip()
    if not url:
        return ""

    # Incoming-webhook URLs are expected to end with a slash
    if not url.endswith("/") and "?" not in url:
        url += "/"

    if token:
        separator = "&" if "?" in url else "?"
        url = f"{url}{separator}token={token}"

    return url


def interpret_response(status_code: int, body: str) -> PublishResult:
    """Turn an HTTP status and body into a publish verdict.

    The endpoint does not always return JSON on success. A 2xx answer with an
    empty, non-JSON or ``null`` body is trusted as a success. Otherwise the JSON
    body must carry a numeric ``code`` of 0, anything else is a rejection.
    """
    if not 200 <= status_code < 300:
        if status_code == 404:
            return PublishResult(
                success=False,
                status_code=status_code,
                failure=FailureKind.NOT_FOUND,
                message="Endpoint not found, check that the URL is correct",
            )
        if status_code in (401, 403):
            return PublishResult(
                success=False,
                status_code=status_code,
                failure=FailureKind.UNAUTHORIZED,
                message="Permission denied, check the endpoint URL and token",
            )
        return PublishResult(
            success=False,
            status_code=status_code,
            failure=FailureKind.HTTP_ERROR,
            message=f"Request failed with status {status_code}",
        )

    if not body.strip():
        return PublishResult(success=True, status_code=status_code, message="Sent")

    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return PublishResult(success=True, status_code=status_code, message="Sent")

    # A JSON null carries no verdict, like an empty body
    if data is None:
        return PublishResult(success=True, status_code=status_code, message="Sent")

    code = data.get("code") if isinstance(data, dict) else None
    # bool is an int subclass, but {"code": false} is not a success code
    if isinstance(code, (int, float)) and not isinstance(code, bool) and code == 0:
        return PublishResult(success=True, status_code=status_code, message="Sent")

    detail = data.get("message") if isinstance(data, dict) else None
    message = (
        f"Endpoint answered {status_code} but did not accept the note, "
        "check that the URL contains the full token"
    )
    if detail:
        message += f" ({detail})"
    return PublishResult(
        success=False,
        status_code=status_code,
        failure=FailureKind.REJECTED,
        message=message,
    )


class PublishClient:
    """Sends prepared text to the endpoint as a form-encoded POST."""

    def __init__(
        self,
        endpoint_url: str,
        token: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self.token = token
        self.timeout = timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint_url.strip())

    @property
    def url(self) -> str:
        return build_endpoint_url(self.endpoint_url, self.token)

    async def send(self, content: str) -> PublishResult:
        """Send content to the endpoint. Never raises."""
        if not self.is_configured:
            logger.error(f"{Colors.RED}Endpoint URL is not set{Colors.RESET}")
            return PublishResult(
                success=False,
                failure=FailureKind.NOT_CONFIGURED,
                message="Endpoint URL is not set, configure it first",
            )

        try:
            async with httpx.AsyncClient(
                transport=self._transport,
                timeout=self.timeout,
            ) as client:
                response = await client.post(
                    self.url,
                    data={"content": content},
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"{Colors.YELLOW}Request to endpoint failed: {e}{Colors.RESET}")
            return PublishResult(
                success=False,
                failure=FailureKind.TRANSPORT_ERROR,
                message=f"Could not reach the endpoint: {e}",
            )

        result = interpret_response(response.status_code, response.text)
        if result.success:
            logger.debug(f"Endpoint accepted {len(content)} chars ({response.status_code})")
        else:
            logger.warning(f"{Colors.YELLOW}{result.message}{Colors.RESET}")
            logger.debug(f"Response body: {response.text[:500]}")
        return result
