"""
ASGI middleware shared by every response.
"""

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from spaserve.support.geo import RequestLocator


class DevServerMiddleware:
    """
    Adds "access-control-allow-origin: *" to every response and hands
    each request to the access log.

    Written as plain ASGI so long-lived event streams pass through
    unbuffered and client disconnects still reach the stream.
    """

    def __init__(self, app: ASGIApp, locator: RequestLocator):
        self.app = app
        self.locator = locator

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        client = scope.get("client")
        url = scope.get("path", "/")
        if scope.get("query_string"):
            url += "?" + scope["query_string"].decode("latin-1")
        self.locator.track(client[0] if client else "", url)

        async def send_with_cors(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((b"access-control-allow-origin", b"*"))
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, send_with_cors)
