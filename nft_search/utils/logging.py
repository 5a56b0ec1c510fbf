import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty at DEBUG; kept at WARNING unless the caller asks otherwise
NOISY_LOGGERS = ("aiohttp", "asyncio", "web3", "urllib3")


def setup_logging(log_level: str = "INFO",
                  log_file: Optional[str] = None,
                  quiet: Iterable[str] = NOISY_LOGGERS) -> logging.Logger:
    """Route nft-search logs to stdout and, optionally, a file

    Args:
        log_level: Level name for the root logger (case-insensitive)
        log_file: Also write to this file; parent directories are created
        quiet: Library loggers capped at WARNING

    Returns:
        The configured root logger
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    formatter = logging.Formatter(LOG_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)

    # Re-running replaces handlers instead of stacking them
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in quiet:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return root
