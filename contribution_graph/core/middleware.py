from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from threading import RLock
from time import monotonic

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


GRAPH_PATH_PREFIX = "/graph/"


class GraphRateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window rate limiter for GET /graph/{username} requests.

    Every graph request triggers an outbound call to the contributions
    provider, so requests are counted per client IP. Clients with no hit
    inside the window are dropped at most once per window.
    """

    def __init__(
        self,
        app,
        requests_per_window: int = 30,
        window_seconds: int = 60,
        path_prefix: str = GRAPH_PATH_PREFIX,
    ) -> None:
        super().__init__(app)
        self.max_requests = max(1, requests_per_window)
        self.window_seconds = max(1, window_seconds)
        self.path_prefix = path_prefix
        self._hits: dict[str, deque[float]] = {}
        self._last_sweep = float("-inf")
        self._lock = RLock()

    @property
    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._hits)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if not self._is_limited(request):
            return await call_next(request)

        retry_after = self.register_hit(self._client_ip(request), monotonic())
        if retry_after is not None:
            return JSONResponse(
                status_code=429,
                content={"detail": "Too Many Requests"},
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)

    def register_hit(self, client: str, now: float) -> int | None:
        """Record a hit for `client` at `now`.

        Returns the seconds to wait when the client's window is already full;
        the rejected hit is not recorded.
        """

        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._drop_idle_clients(cutoff)
                self._last_sweep = now

            hits = self._hits.setdefault(client, deque())
            while hits and hits[0] <= cutoff:
                hits.popleft()

            if len(hits) >= self.max_requests:
                return max(1, int(self.window_seconds - (now - hits[0])))

            hits.append(now)
            return None

    def _drop_idle_clients(self, cutoff: float) -> None:
        idle = [client for client, hits in self._hits.items() if hits[-1] <= cutoff]
        for client in idle:
            del self._hits[client]

    def _is_limited(self, request: Request) -> bool:
        return request.method == "GET" and request.url.path.startswith(
            self.path_prefix
        )

    @staticmethod
    def _client_ip(request: Request) -> str:
        # Reverse proxies put the original client first in X-Forwarded-For.
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip() or "unknown"

        if request.client and request.client.host:
            return request.client.host

        return "unknown"
