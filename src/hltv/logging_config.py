"""Logging setup for the ``hltv`` command line.

Records go to stderr so the JSON the CLI prints on stdout stays
parseable. A run that touches the network also keeps a DEBUG log file
under ``{data_dir}/logs/``; offline conversions pass ``data_dir=None``
and leave nothing on disk.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

# Chatty at DEBUG: nodriver logs every CDP message, websockets every frame
QUIET_LOGGERS = ("nodriver", "websockets")


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-5s %(message)s", datefmt="%H:%M:%S")
    )
    return handler


def _file_handler(log_file: Path) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-5s [%(name)s] %(message)s")
    )
    return handler


def setup_logging(
    data_dir: str | Path | None = "data", console_level: int = logging.INFO
) -> Path | None:
    """Replace the root logger's handlers with the CLI's.

    Handlers installed by an earlier call are closed, so calling this
    twice does not duplicate output.

    Args:
        data_dir: Base data directory; the log file goes to its ``logs/``
            subdirectory. None disables the file handler.
        console_level: Minimum level shown on stderr.

    Returns:
        Path of the new log file, or None without ``data_dir``.
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(logging.DEBUG)
    root.addHandler(_console_handler(console_level))

    log_file = None
    if data_dir is not None:
        log_dir = Path(data_dir) / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"run-{datetime.now():%Y-%m-%d-%H%M%S}.log"
        root.addHandler(_file_handler(log_file))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return log_file
