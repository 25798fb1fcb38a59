import logging
from rich.logging import RichHandler


def configure(level: str = "INFO") -> None:
    """Pretty console logging for notebooks and scripts (the library itself never calls this)."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_time=False, show_path=False)],
    )
    logging.getLogger("netmap").setLevel(level.upper())
