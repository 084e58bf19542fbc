"""Security headers middleware for a JSON-only API.

Responses are never framed, sniffed or cached by intermediaries. Raw ASGI.
"""

from typing import Callable

API_HEADERS = {
    "Cache-Control": "no-store",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def SecurityHeadersMiddleware(
    app: Callable, headers: dict[str, str] | None = None, *, hsts: bool = False
) -> Callable:
    """Add API_HEADERS (or headers) to every response unless the route set them itself.

    HSTS is opt-in because local runs are plain HTTP.
    """
    resolved = dict(API_HEADERS if headers is None else headers)
    if hsts:
        resolved["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
    extra = [(name.lower().encode(), value.encode()) for name, value in resolved.items()]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        async def send_with_headers(message: dict) -> None:
            if message["type"] == "http.response.start":
                current = list(message.get("headers", []))
                present = {name.lower() for name, _ in current}
                current.extend(h for h in extra if h[0] not in present)
                message["headers"] = current
            await send(message)

        await app(scope, receive, send_with_headers)

    return asgi_app
