"""Fake registry server used by the HTTP tests."""

from dataclasses import dataclass
from typing import Any, Callable

from aiohttp import web

V2_HEADERS = {"Docker-Distribution-Api-Version": "registry/2.0"}


@dataclass
class RecordedRequest:
    """A request seen by the fake registry."""

    path: str
    query: dict[str, str]
    authorization: str | None
    user_agent: str | None = None


class FakeRegistry:
    """Catch-all aiohttp application answering from a path table.

    Routes can be added while the server is running, each route builds a
    fresh response per request.
    """

    def __init__(self) -> None:
        self.app = web.Application()
        self.app.router.add_route("GET", "/{tail:.*}", self._dispatch)
        self.routes: dict[str, Callable[[web.Request], web.StreamResponse]] = {}
        self.requests: list[RecordedRequest] = []
        self.url = ""

    def respond(
        self,
        path: str,
        status: int = 200,
        json: Any = None,
        text: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        """Answer GET ``path`` with a fixed response."""

        def handler(request: web.Request) -> web.StreamResponse:
            if json is not None:
                return web.json_response(json, status=status, headers=headers)
            return web.Response(status=status, text=text or "", headers=headers)

        self.routes[path] = handler

    def respond_with(
        self, path: str, handler: Callable[[web.Request], web.StreamResponse]
    ) -> None:
        """Answer GET ``path`` with a custom handler."""
        self.routes[path] = handler

    def url_for(self, path: str) -> str:
        return self.url.rstrip("/") + path

    def requests_to(self, path: str) -> list[RecordedRequest]:
        return [request for request in self.requests if request.path == path]

    async def _dispatch(self, request: web.Request) -> web.StreamResponse:
        self.requests.append(
            RecordedRequest(
                path=request.path,
                query=dict(request.query),
                authorization=request.headers.get("Authorization"),
                user_agent=request.headers.get("User-Agent"),
            )
        )
        handler = self.routes.get(request.path)
        if handler is None:
            return web.json_response(
                {"errors": [{"code": "NAME_UNKNOWN"}]}, status=404, headers=V2_HEADERS
            )
        return handler(request)


def bearer_protected(
    token: str,
    tags: list[str],
    realm: str,
    challenge_extra: str = "",
) -> Callable[[web.Request], web.StreamResponse]:
    """Tag list handler that challenges requests without the right token."""

    def handler(request: web.Request) -> web.StreamResponse:
        if request.headers.get("Authorization") == f"Bearer {token}":
            return web.json_response({"tags": tags}, headers=V2_HEADERS)
        challenge = f'Bearer realm="{realm}"{challenge_extra}'
        return web.json_response(
            {"errors": [{"code": "UNAUTHORIZED"}]},
            status=401,
            headers={**V2_HEADERS, "WWW-Authenticate": challenge},
        )

    return handler
