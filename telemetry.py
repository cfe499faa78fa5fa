"""
Logging setup for TicTacToe.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def default_log_dir() -> Path:
    """Logs live next to the settings file, in the user's home."""
    return Path.home() / ".tictactoe_ai" / "logs"


def setup_logging(log_dir: Optional[Path] = None, verbose: bool = False) -> logging.Logger:
    """
    Send log records to <log_dir>/app.log (and the console when verbose).

    Safe to call more than once; the same file is only attached once. If the
    log directory can't be created, records go to the console instead.
    """
    logs_dir = Path(log_dir) if log_dir is not None else default_log_dir()
    log_file = (logs_dir / "app.log").resolve()

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    fmt = logging.Formatter(LOG_FORMAT)

    if any(getattr(h, "baseFilename", None) == str(log_file) for h in logger.handlers):
        return logger

    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding="utf-8")
    except OSError as e:
        sh = logging.StreamHandler()
        sh.setFormatter(fmt)
        logger.addHandler(sh)
        logger.warning("Could not open log file %s, logging to console: %s", log_file, e)
        return logger

    fh.setFormatter(fmt)
    logger.addHandler(fh)
    if verbose:
        sh = logging.StreamHandler()
        sh.setFormatter(fmt)
        logger.addHandler(sh)
    return logger
