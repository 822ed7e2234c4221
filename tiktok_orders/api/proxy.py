"""Backend passthrough.

``GET /api/<path>`` is forwarded to ``<backend>/<path>`` with the same
query string, so browser code can call the backend through the
dashboard's own origin.
"""

import httpx
import structlog
from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["Proxy"])

# Hop-by-hop and encoding headers that must not be copied from upstream.
_EXCLUDED_HEADERS = {
    "connection",
    "content-encoding",
    "content-length",
    "keep-alive",
    "transfer-encoding",
}


@router.get("/{path:path}")
async def proxy_get(path: str, request: Request) -> Response:
    """Forward a read request to the backend with the ``/api`` prefix removed."""
    client = request.app.state.api_client
    try:
        upstream = await client.forward(path, list(request.query_params.multi_items()))
    except httpx.RequestError as e:
        logger.error("Proxy request failed", path=path, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={
                "error_code": "BAD_GATEWAY",
                "message": f"Backend request failed: {str(e)}",
                "details": [],
                "request_id": getattr(request.state, "request_id", None),
            },
        )

    headers = {
        key: value
        for key, value in upstream.headers.items()
        if key.lower() not in _EXCLUDED_HEADERS
    }
    return Response(
        content=upstream.content,
        status_code=upstream.status_code,
        headers=headers,
    )
