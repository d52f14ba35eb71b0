"""
API caller for the metadata registry

DESIGN INTENT:
The registry service only knows how to build URLs and payloads. Everything
that touches the network lives here behind the ``ApiCaller`` protocol:
- basic-auth credentials and default headers
- connection retry with exponential backoff (connect failures only, the
  request never reached the server so it is safe to resend)
- mapping of HTTP error statuses to the RemoteApiError family
- Prometheus metrics and structured request logging

USAGE:
    async with HttpApiCaller(config) as caller:
        data = await caller.call("GET", f"{config.base_url}/metadata_fields")
"""

import time
from typing import Any, Dict, Optional, Protocol

import backoff
import httpx
from httpx import AsyncClient, Response
from prometheus_client import Counter, Histogram

from common_logging.setup import get_logger
from ..config import MetadataApiConfig, get_config
from ..models.exceptions import RemoteApiError, TransportError, error_for_status

logger = get_logger(__name__)

USER_AGENT = "asset-metadata-registry/1.0.0"

JSON_HEADERS = {"Content-Type": "application/json"}


metadata_api_requests_total = Counter(
    'metadata_api_requests_total',
    'Total metadata API requests',
    ['method', 'status']
)

metadata_api_request_duration = Histogram(
    'metadata_api_request_duration_seconds',
    'Metadata API request duration',
    ['method'],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0)
)


class ApiCaller(Protocol):
    """Transport boundary consumed by the registry service"""

    async def call(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        ...


class HttpApiCaller:
    """
    httpx based ApiCaller
    One instance can be shared by concurrent tasks; it holds no request state.
    """

    def __init__(
        self,
        config: Optional[MetadataApiConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            config: Connection settings, loaded from the environment if omitted
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.config = config or get_config()
        self._transport = transport
        self._client: Optional[AsyncClient] = None

    def _get_client(self) -> AsyncClient:
        """Get or create the pooled httpx client"""
        if self._client is None:
            client_kwargs = {
                'timeout': httpx.Timeout(self.config.timeout),
                'headers': {
                    'Accept': 'application/json',
                    'User-Agent': USER_AGENT,
                },
            }
            if self.config.auth:
                client_kwargs['auth'] = self.config.auth
            if self._transport is not None:
                client_kwargs['transport'] = self._transport
            self._client = AsyncClient(**client_kwargs)
        return self._client

    @backoff.on_exception(
        backoff.expo,
        (httpx.ConnectError, httpx.ConnectTimeout),
        max_tries=3,
        max_time=10
    )
    async def _send(self, method: str, url: str, **kwargs) -> Response:
        return await self._get_client().request(method, url, **kwargs)

    async def call(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """
        Send one request and decode the JSON answer

        Raises:
            TransportError: the exchange failed before a response arrived
            RemoteApiError: the server answered with status >= 400
        """
        method = method.upper()
        request_kwargs: Dict[str, Any] = {'headers': dict(extra_headers or {})}
        if payload is not None:
            request_kwargs['json'] = payload

        logger.debug(
            f"HTTP {method} {url}",
            extra={'extra_fields': {
                'method': method,
                'url': url,
                'body': payload if self.config.log_request_body else None,
            }}
        )

        start_time = time.time()
        try:
            response = await self._send(method, url, **request_kwargs)
        except httpx.RequestError as e:
            self._record(method, 'error', start_time)
            logger.error(
                f"HTTP {method} {url} failed: {e}",
                extra={'extra_fields': {
                    'method': method,
                    'url': url,
                    'error': type(e).__name__,
                    'duration': time.time() - start_time,
                }}
            )
            raise TransportError(f"{method} {url} failed: {e}", method=method, url=url) from e

        self._record(method, str(response.status_code), start_time)
        logger.debug(
            f"HTTP {method} {url} -> {response.status_code}",
            extra={'extra_fields': {
                'method': method,
                'url': url,
                'status': response.status_code,
                'duration': time.time() - start_time,
            }}
        )

        if response.status_code >= 400:
            raise self._error_from_response(response, method, url)
        return self._decode(response, method, url)

    def _record(self, method: str, status: str, start_time: float) -> None:
        if not self.config.enable_metrics:
            return
        metadata_api_requests_total.labels(method=method, status=status).inc()
        metadata_api_request_duration.labels(method=method).observe(time.time() - start_time)

    @staticmethod
    def _error_from_response(response: Response, method: str, url: str) -> RemoteApiError:
        try:
            body: Any = response.json()
        except ValueError:
            body = response.text

        message = None
        if isinstance(body, dict):
            error = body.get('error')
            if isinstance(error, dict):
                message = error.get('message')
            elif isinstance(error, str):
                message = error
        if not message:
            message = response.text or response.reason_phrase

        error_cls = error_for_status(response.status_code)
        logger.warning(
            f"HTTP {method} {url} rejected with {response.status_code}: {message}",
            extra={'extra_fields': {'method': method, 'url': url, 'status': response.status_code}}
        )
        return error_cls(response.status_code, message, payload=body, method=method, url=url)

    @staticmethod
    def _decode(response: Response, method: str, url: str) -> Dict[str, Any]:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise RemoteApiError(
                response.status_code,
                "response body is not valid JSON",
                payload=response.text,
                method=method,
                url=url,
            ) from e

    async def close(self):
        """Close the client and release pooled connections"""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
