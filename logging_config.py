import logging
import os

from rich.logging import RichHandler


def configure(level: str | None = None) -> None:
    level = level or os.getenv("ROUTE_LOG_LEVEL", "INFO")
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_time=False, show_path=False)],
        force=True,
    )
