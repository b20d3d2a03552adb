"""
Backend API Module - shared HTTP plumbing

Single responsibility: build the async HTTP client and turn a remote call into
decoded JSON, mapping every transport, status and decoding problem onto the
caller's stage-specific exception.
"""

from typing import Any, Dict, Optional, Type

import httpx
import structlog

from config import ServiceConfig, config

# Configure structured logger
logger = structlog.get_logger(__name__)


class TranscriptorError(Exception):
    """Base exception for all YouTube Transcriptor failures"""
    pass


class ServiceError(TranscriptorError):
    """A remote service call failed (transport error, non-2xx status or bad body)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def create_http_client(
    service_config: Optional[ServiceConfig] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """Create the async client used for all backend calls.

    ``transport`` lets callers substitute the network layer (tests use
    ``httpx.MockTransport``).
    """
    service_config = service_config or config.service
    timeout = httpx.Timeout(service_config.timeout, connect=service_config.connect_timeout)

    logger.debug("Creating backend HTTP client",
                base_url=service_config.base_url,
                timeout=service_config.timeout)

    return httpx.AsyncClient(
        base_url=service_config.base_url,
        timeout=timeout,
        transport=transport,
        follow_redirects=True
    )


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    error_cls: Type[ServiceError],
    action: str,
    **kwargs: Any
) -> Dict[str, Any]:
    """Send a request and return the decoded JSON object.

    Raises:
        error_cls: on transport failure, timeout, non-success status, or a
            body that is not a JSON object.
    """
    logger.debug("Sending backend request", method=method, path=path, action=action)

    try:
        response = await client.request(method, path, **kwargs)
    except httpx.TimeoutException as e:
        logger.error("Backend request timed out", path=path, action=action, error=str(e))
        raise error_cls(f"Failed to {action}: request timed out") from e
    except httpx.HTTPError as e:
        logger.error("Backend request failed", path=path, action=action, error=str(e))
        raise error_cls(f"Failed to {action}: {e}") from e

    if not response.is_success:
        logger.error("Backend returned error status",
                    path=path,
                    action=action,
                    status_code=response.status_code)
        raise error_cls(
            f"Failed to {action} (HTTP {response.status_code})",
            status_code=response.status_code
        )

    try:
        data = response.json()
    except ValueError as e:
        logger.error("Backend returned invalid JSON", path=path, action=action)
        raise error_cls(f"Failed to {action}: invalid JSON response",
                        status_code=response.status_code) from e

    if not isinstance(data, dict):
        logger.error("Backend returned unexpected payload",
                    path=path,
                    action=action,
                    payload_type=type(data).__name__)
        raise error_cls(f"Failed to {action}: unexpected response payload",
                        status_code=response.status_code)

    return data
