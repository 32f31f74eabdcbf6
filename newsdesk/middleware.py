"""
Request diagnostics: SQL statement counting and the per-call access log.

Every RPC response carries ``X-Response-Time-Ms`` and ``X-Query-Count``
and produces one line on the ``newsdesk.access`` logger, e.g.::

    POST /rpc/getNewsById -> 200 (1.84 ms, 1 queries)
"""
import logging
import time
from contextvars import ContextVar

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine
from starlette.types import ASGIApp, Message, Receive, Scope, Send

access_logger = logging.getLogger("newsdesk.access")

statement_count: ContextVar[int] = ContextVar("statement_count", default=0)


def count_statements(engine: AsyncEngine) -> None:
    """Count every statement *engine* sends to the database in ``statement_count``."""

    def _on_execute(conn, cursor, statement, parameters, context, executemany):
        statement_count.set(statement_count.get() + 1)

    event.listen(engine.sync_engine, "before_cursor_execute", _on_execute)


def _diagnostic_headers(elapsed_ms: float, statements: int) -> list[tuple[bytes, bytes]]:
    return [
        (b"x-response-time-ms", f"{elapsed_ms:.2f}".encode("latin-1")),
        (b"x-query-count", str(statements).encode("latin-1")),
    ]


class RequestDiagnosticsMiddleware:
    """
    Pure ASGI middleware timing each HTTP request.

    It runs the downstream app in the caller's task, so statements counted
    by the engine listener are visible here when the response starts.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        statement_count.set(0)
        started = time.perf_counter()

        async def send_with_diagnostics(message: Message) -> None:
            if message["type"] == "http.response.start":
                elapsed_ms = (time.perf_counter() - started) * 1000
                statements = statement_count.get()
                message["headers"] = [
                    *message.get("headers", []),
                    *_diagnostic_headers(elapsed_ms, statements),
                ]
                access_logger.info(
                    "%s %s -> %s (%.2f ms, %d queries)",
                    scope["method"],
                    scope["path"],
                    message["status"],
                    elapsed_ms,
                    statements,
                )
            await send(message)

        await self.app(scope, receive, send_with_diagnostics)
