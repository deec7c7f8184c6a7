import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging to stdout."""
    logging.basicConfig(
        format="%(asctime)s - [%(levelname)s] %(name)s: %(message)s",
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
