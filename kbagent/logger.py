import logging

from rich.console import Console
from rich.logging import RichHandler

logger = logging.getLogger("kbagent")

# Libraries that are chatty at DEBUG/INFO about every request
NOISY_LOGGERS = ("httpx", "httpcore", "openai")


def setup_logging(level: str = "INFO") -> None:
    """Route all log records to stderr through rich, keeping stdout for answers."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)],
        force=True,
    )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
