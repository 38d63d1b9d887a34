import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, IO, Optional

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)

# attributes every LogRecord carries; anything else arrived through ``extra=``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime", "request_id"}


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        record.request_id = request_id_ctx.get() or "-"
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line.

    Context passed with ``extra=`` (landmark, currency, source ...) is lifted
    into top-level keys so resolution failures can be filtered per landmark.
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        entry: Dict[str, Any] = {
            "time": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": getattr(record, "request_id", "-"),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                entry[key] = value if isinstance(value, (int, float, bool)) else str(value)
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def init_logging(debug: bool = False, stream: Optional[IO[str]] = None) -> logging.Logger:
    """Attach a JSON handler to the ``ilp_price`` logger tree and return it.

    Handlers installed by an earlier call are replaced, so app factories can
    call this repeatedly. Records still propagate to the host's root logger.
    """
    logger = logging.getLogger("ilp_price")
    for handler in list(logger.handlers):
        if isinstance(handler.formatter, JsonFormatter):
            logger.removeHandler(handler)
    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return logger


async def request_context_middleware(request, call_next):  # type: ignore
    """Tag every log line of a request with its id and echo it back."""
    rid = request.headers.get("x-request-id") or uuid.uuid4().hex
    token = request_id_ctx.set(rid)
    log = logging.getLogger("ilp_price.request")
    started = time.perf_counter()
    try:
        response = await call_next(request)
        log.debug(
            "%s %s -> %s",
            request.method,
            request.url.path,
            response.status_code,
            extra={"elapsed_ms": round((time.perf_counter() - started) * 1000, 1)},
        )
        response.headers["x-request-id"] = rid
        return response
    finally:
        request_id_ctx.reset(token)
