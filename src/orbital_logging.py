import logging
import os
from logging.handlers import WatchedFileHandler
from pathlib import Path

FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(log_path=None, also_console: bool = True) -> None:
    """
    Configure the root logger for a sampling run.
    Level comes from ORBITAL_LOG_LEVEL (default INFO).
    Idempotent: an existing FileHandler for log_path or console handler is reused.
    """
    root = logging.getLogger()
    env_level = os.getenv("ORBITAL_LOG_LEVEL", "INFO").upper()
    root.setLevel(getattr(logging, env_level, logging.INFO))
    fmt = logging.Formatter(FORMAT)

    if also_console and not any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler) for h in root.handlers
    ):
        ch = logging.StreamHandler()
        ch.setFormatter(fmt)
        root.addHandler(ch)

    if log_path is None:
        return

    path = Path(log_path).resolve()
    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and Path(h.baseFilename).resolve() == path:
            return

    path.parent.mkdir(parents=True, exist_ok=True)
    # File handler (monitors file replacement/rotation safely)
    fh = WatchedFileHandler(path, mode="a", encoding="utf-8", delay=False)
    fh.setFormatter(fmt)
    root.addHandler(fh)
    root.info(f"Logging initialized. Log file: {path} (level={logging.getLevelName(root.level)})")


def reset_logging():
    """Remove and close every handler on the root logger."""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
