from urllib.parse import parse_qs

from starlette.types import ASGIApp, Receive, Scope, Send


class MethodOverrideMiddleware:
    """
    Let HTML forms reach PUT/PATCH/DELETE routes.

    A POST whose query string carries ``_method=PUT`` (or PATCH, DELETE) is
    routed as that method, e.g. ``<form method="post" action="/flights/1?_method=PUT">``.
    """

    allowed_methods = {"PUT", "PATCH", "DELETE"}

    def __init__(self, app: ASGIApp, param: str = "_method"):
        self.app = app
        self.param = param

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "POST":
            params = parse_qs(scope.get("query_string", b"").decode("latin-1"))
            override = params.get(self.param, [""])[0].upper()
            if override in self.allowed_methods:
                scope = dict(scope, method=override)
        await self.app(scope, receive, send)
