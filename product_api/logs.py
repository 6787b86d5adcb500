# product_api/logs.py
import logging
import time

from fastapi import Request
from rich.logging import RichHandler

access_logger = logging.getLogger("product_api.access")


def configure_logging(level: str = "INFO") -> None:
    """
    Route all log records through a single rich console handler.
    Safe to call more than once; existing root handlers are replaced.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = RichHandler(rich_tracebacks=True, show_path=False, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.setLevel(level.upper())

    # uvicorn ships its own access log; ours replaces it
    logging.getLogger("uvicorn.access").disabled = True


async def access_log_middleware(request: Request, call_next):
    # one line per request: "GET /api/products 200 3.1 ms"
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    access_logger.info(
        "%s %s %s %.1f ms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response
