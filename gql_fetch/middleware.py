"""
Middleware dispatch chain.

Every run threads its request through the registered middleware in
registration order before reaching the terminal transport step:

    request -> middleware[0] -> middleware[1] -> ... -> transport.post()
    result  <-------------------------------------------------------

A middleware is a callable ``(request, next)``. ``next`` takes no arguments
and returns an awaitable for the rest of the chain. A middleware may change
the request, await ``next()`` and post-process its result, or return without
calling ``next`` to short-circuit the chain. Plain functions and coroutine
functions are both accepted.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Iterable, Optional, Tuple, Union

from .exceptions import TimeoutError
from .query.models import Request

logger = logging.getLogger(__name__)

NextFunction = Callable[[], Awaitable[Any]]
Middleware = Callable[[Request, NextFunction], Union[Awaitable[Any], Any]]
TerminalStep = Callable[[Request], Awaitable[Any]]


class DispatchChain:
    """
    Ordered chain-of-responsibility over a fixed snapshot of middleware.

    The middleware sequence is copied into a tuple on construction, so
    registering more middleware elsewhere never affects this chain. Each
    ``dispatch`` keeps its own position, so one chain may serve concurrent
    dispatches.
    """

    def __init__(self, middleware: Iterable[Middleware], terminal: TerminalStep) -> None:
        """
        Initialize dispatch chain.

        Args:
            middleware: Middleware in execution order
            terminal: Final step, called with the request once every
                middleware has continued
        """
        self.middleware: Tuple[Middleware, ...] = tuple(middleware)
        self.terminal = terminal

    def __len__(self) -> int:
        return len(self.middleware)

    async def dispatch(self, request: Request) -> Any:
        """
        Run the chain for one request.

        Returns:
            The terminal step's result, or the value of the middleware that
            short-circuited

        Raises:
            Exception: Whatever a middleware or the terminal step raised,
                unwrapped
        """
        return await self._call(0, request)

    async def _call(self, index: int, request: Request) -> Any:
        if index >= len(self.middleware):
            return await self.terminal(request)

        middleware = self.middleware[index]

        def advance() -> Awaitable[Any]:
            return self._call(index + 1, request)

        result = middleware(request, advance)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __repr__(self) -> str:
        names = [getattr(m, "__name__", type(m).__name__) for m in self.middleware]
        return f"DispatchChain({' -> '.join(names + ['transport'])})"


class HeaderMiddleware:
    """Set headers on every request before continuing."""

    def __init__(self, headers: Dict[str, str]) -> None:
        self.headers = dict(headers)

    async def __call__(self, request: Request, next: NextFunction) -> Any:
        request.headers.update(self.headers)
        return await next()


class TimeoutMiddleware:
    """
    Bound the rest of the chain by a timeout.

    The continuation is raced against a timer; on expiry the continuation is
    cancelled and ``TimeoutError`` is raised. Errors raised by the rest of the
    chain, timeouts included, propagate unchanged.
    """

    def __init__(self, seconds: float) -> None:
        if seconds <= 0:
            raise ValueError("Timeout must be positive")
        self.seconds = seconds

    async def __call__(self, request: Request, next: NextFunction) -> Any:
        task = asyncio.ensure_future(next())
        try:
            done, _ = await asyncio.wait({task}, timeout=self.seconds)
        except asyncio.CancelledError:
            task.cancel()
            raise

        if task not in done:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
            raise TimeoutError(
                f"GraphQL request exceeded {self.seconds}s",
                url=request.url,
                timeout_value=self.seconds,
            )

        return task.result()


class LoggingMiddleware:
    """Log each operation, its duration, and any failure."""

    def __init__(
        self, logger: Optional[logging.Logger] = None, level: int = logging.DEBUG
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.level = level

    async def __call__(self, request: Request, next: NextFunction) -> Any:
        operation = request.query.split("{", 1)[0].strip() or "anonymous"
        start_time = time.time()
        self.logger.log(self.level, f"GraphQL {operation} -> {request.url}")
        try:
            result = await next()
        except Exception as e:
            self.logger.warning(
                f"GraphQL {operation} failed after "
                f"{(time.time() - start_time) * 1000:.1f}ms: {e}"
            )
            raise
        self.logger.log(
            self.level,
            f"GraphQL {operation} completed in {(time.time() - start_time) * 1000:.1f}ms",
        )
        return result
