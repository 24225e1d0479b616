"""
HTTP Client Adapter

Thin wrapper over httpx.Client shared by the Pinpoint and HiBob clients.
Applies the configured connect/read timeouts and translates request
failures into RemoteServiceError so callers only ever see the onboarding
error taxonomy.
"""

from typing import Any

import httpx
import structlog

from onboarding.config import Settings
from onboarding.exceptions import ParseError, RemoteServiceError

# Truncate response bodies carried in errors and logs
MAX_ERROR_BODY_CHARS = 500


def build_timeout(settings: Settings) -> httpx.Timeout:
    """Connect bound plus a longer read/write/pool bound."""
    return httpx.Timeout(settings.http_read_timeout, connect=settings.http_connect_timeout)


class ServiceHttpClient:
    """
    Per-service HTTP client.

    One instance is created per service per invocation and closed when the
    workflow finishes. Pass `transport` to route requests somewhere other
    than the network (tests, local runs).
    """

    def __init__(
        self,
        service: str,
        base_url: str,
        settings: Settings,
        log: structlog.stdlib.BoundLogger,
        headers: dict[str, str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        self.service = service
        self.log = log.bind(service=service)
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers or {},
            timeout=build_timeout(settings),
            transport=transport,
        )

    def __enter__(self) -> "ServiceHttpClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: Any = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """
        Send one request and return the response whatever its status.

        Raises:
            RemoteServiceError: On timeout or any other request failure
                (transport, redirect or body decoding)
        """
        self.log.debug("http_request", method=method, path=path)
        try:
            response = self._client.request(
                method,
                path,
                params=params,
                json=json_body,
                content=content,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            self.log.error("http_timeout", method=method, path=path, error=str(e))
            raise RemoteServiceError(
                service=self.service,
                message=f"Request to {self.service} timed out: {method} {path}",
                timed_out=True,
            ) from e
        except httpx.RequestError as e:
            self.log.error("http_request_error", method=method, path=path, error=str(e))
            raise RemoteServiceError(
                service=self.service,
                message=f"Request to {self.service} failed: {e}",
            ) from e

        self.log.debug(
            "http_response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response


def remote_error(response: httpx.Response, service: str, action: str) -> RemoteServiceError:
    """Build the RemoteServiceError describing a failed response."""
    body = response.text[:MAX_ERROR_BODY_CHARS]
    return RemoteServiceError(
        service=service,
        message=f"Failed to {action}: {response.status_code} - {body}",
        status=response.status_code,
        body=body,
    )


def raise_for_remote_status(response: httpx.Response, service: str, action: str) -> None:
    """Raise RemoteServiceError for any non-2xx response."""
    if not response.is_success:
        raise remote_error(response, service, action)


def parse_json_body(response: httpx.Response, service: str) -> Any:
    """
    Decode a response body as JSON.

    Raises:
        ParseError: With upstream=True, since the remote sent the bad payload
    """
    try:
        return response.json()
    except ValueError as e:
        raise ParseError(
            f"Invalid JSON in {service} response",
            upstream=True,
            service=service,
        ) from e
