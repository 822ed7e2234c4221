"""Order backend API client.

Thin HTTP client for the order-management backend. Both the dashboard
and the MCP server go through this module. Transport problems are
returned as failed responses, never raised.
"""

from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

logger = structlog.get_logger()


@dataclass
class APIError:
    """Represents an API error response."""

    error_code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class APIResponse:
    """Represents an API response."""

    success: bool
    data: dict[str, Any] | list[Any] | None = None
    error: APIError | None = None


def _error_from_response(response: httpx.Response) -> APIError:
    """Build an APIError from a non-2xx backend response."""
    try:
        error_data = response.json()
    except ValueError:
        error_data = None

    if not isinstance(error_data, dict):
        error_data = {}

    return APIError(
        error_code=error_data.get("error_code", f"HTTP_{response.status_code}"),
        message=error_data.get(
            "message", f"HTTP error! status: {response.status_code}"
        ),
        status_code=response.status_code,
        details=error_data.get("details") or {},
    )


class OrderAPIClient:
    """HTTP client for the order backend.

    Wraps the two backend endpoints used by the dashboard and the MCP
    tools, plus a raw passthrough used by the dashboard proxy.
    """

    def __init__(
        self,
        base_url: str,
        order_list_path: str = "/api-order",
        order_sync_path: str = "/sync-order-id",
        timeout: float = 30.0,
    ) -> None:
        """Initialize the API client.

        Args:
            base_url: Order backend base URL.
            order_list_path: Path of the order listing endpoint.
            order_sync_path: Path of the sync endpoint.
            timeout: Request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.order_list_path = order_list_path
        self.order_sync_path = order_sync_path
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> APIResponse:
        """Make an API request.

        Args:
            method: HTTP method.
            path: API endpoint path.
            params: Query parameters.

        Returns:
            APIResponse with success status and data or error.
        """
        client = await self._get_client()

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            logger.debug("Making API request", method=method, path=path)

            response = await client.request(
                method=method,
                url=path,
                params=params,
            )

            if response.status_code >= 400:
                error = _error_from_response(response)
                logger.warning(
                    "API request rejected",
                    path=path,
                    status_code=response.status_code,
                    error_code=error.error_code,
                )
                return APIResponse(success=False, error=error)

            if response.status_code == 204:
                return APIResponse(success=True, data=None)

            try:
                data = response.json()
            except ValueError as e:
                logger.error("API returned invalid JSON", path=path, error=str(e))
                return APIResponse(
                    success=False,
                    error=APIError(
                        error_code="INVALID_JSON",
                        message=f"Invalid JSON response: {str(e)}",
                        status_code=response.status_code,
                    ),
                )

            return APIResponse(success=True, data=data)

        except httpx.TimeoutException as e:
            logger.error("API request timeout", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="TIMEOUT",
                    message=f"Request timed out: {path}",
                    status_code=504,
                ),
            )
        except httpx.RequestError as e:
            logger.error("API request failed", path=path, error=str(e))
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="REQUEST_ERROR",
                    message=f"Request failed: {str(e)}",
                    status_code=500,
                ),
            )
        except Exception as e:
            logger.exception("Unexpected API error", path=path)
            return APIResponse(
                success=False,
                error=APIError(
                    error_code="INTERNAL_ERROR",
                    message=f"Internal error: {str(e)}",
                    status_code=500,
                ),
            )

    # =========================================================================
    # Order Endpoints
    # =========================================================================

    async def list_orders(self) -> APIResponse:
        """Fetch the order list.

        Returns:
            APIResponse whose data is the raw ``{"order_list": [...]}`` body.
        """
        return await self._request(method="GET", path=self.order_list_path)

    async def sync_order(self, order_id: str) -> APIResponse:
        """Ask the backend to sync one order with its upstream source.

        Args:
            order_id: User-facing order code.

        Returns:
            APIResponse whose data is the raw ``{"success": ...}`` body.
        """
        return await self._request(
            method="GET",
            path=self.order_sync_path,
            params={"order_id": order_id},
        )

    # =========================================================================
    # Passthrough
    # =========================================================================

    async def forward(
        self,
        path: str,
        params: list[tuple[str, str]] | None = None,
    ) -> httpx.Response:
        """Forward a GET request to the backend unchanged.

        Unlike the endpoint methods this raises ``httpx.RequestError``
        so the caller can map it to a gateway error.

        Args:
            path: Backend path, already stripped of any local prefix.
            params: Query parameters in their original order.

        Returns:
            The raw backend response.
        """
        client = await self._get_client()
        logger.debug("Forwarding request", path=path)
        return await client.get("/" + path.lstrip("/"), params=params)
