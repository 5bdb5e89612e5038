"""
Logging setup for the dispatch service.

Modules log through ``logging.getLogger(__name__)``; this only installs the
root handler once at application startup.
"""
import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    # uvicorn --reload re-imports the app; don't stack handlers
    if any(getattr(h, "_gowater", False) for h in root.handlers):
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._gowater = True  # type: ignore[attr-defined]
    root.addHandler(handler)
