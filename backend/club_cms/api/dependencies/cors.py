"""
CORS Middleware
===============
Permissive cross-origin headers on every response.

Unlike starlette's ``CORSMiddleware`` this answers every OPTIONS request,
preflight or not, with an empty 200, and stamps the headers whether or
not the request carried an ``Origin``.
"""

from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Admin-Token",
}


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """Answer OPTIONS directly and add CORS headers to everything else"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=CORS_HEADERS)

        response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value
        return response
