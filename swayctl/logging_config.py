"""Logging for swayctl.

Everything logs under the ``swayctl`` logger. The CLI picks the level from
``--verbose``/``--debug``; ``SWAYCTL_LOG_LEVEL`` overrides both so library
users and scripts can turn on control-binary tracing without flags.
"""

import logging
import os
import subprocess
import sys
import time
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional, Sequence


LOG_LEVEL_ENV = "SWAYCTL_LOG_LEVEL"

# Control binary output is JSON that can run to megabytes (tree queries)
OUTPUT_EXCERPT = 200

FORMATS = {
    logging.WARNING: "swayctl: %(levelname)s: %(message)s",
    logging.INFO: "%(asctime)s swayctl [%(levelname)s] %(message)s",
    logging.DEBUG: "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s",
}


class LevelColorFormatter(logging.Formatter):
    """Colours the level name; the record is left as it was found."""

    COLORS = {
        logging.DEBUG: '\033[2m',       # dim
        logging.INFO: '\033[34m',       # blue
        logging.WARNING: '\033[33m',    # yellow
        logging.ERROR: '\033[1;31m',    # bold red
    }
    RESET = '\033[0m'

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(min(record.levelno, logging.ERROR))
        if color is None:
            return super().format(record)

        plain = record.levelname
        record.levelname = f"{color}{plain}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def resolve_level(verbose: bool = False, debug: bool = False,
                  environ: Optional[Mapping[str, str]] = None) -> int:
    """Pick the level: SWAYCTL_LOG_LEVEL, then --debug, then --verbose.

    Unknown level names in the environment are ignored.
    """
    environ = os.environ if environ is None else environ
    name = environ.get(LOG_LEVEL_ENV, "").strip().upper()
    level = logging.getLevelName(name) if name else None
    if isinstance(level, int):
        return level
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def use_color(stream) -> bool:
    return stream.isatty() and "NO_COLOR" not in os.environ


def setup_logging(verbose: bool = False, debug: bool = False,
                  environ: Optional[Mapping[str, str]] = None) -> logging.Logger:
    """Install a single stderr handler on the ``swayctl`` logger.

    Safe to call repeatedly; earlier handlers are replaced.

    Returns:
        The ``swayctl`` logger
    """
    level = resolve_level(verbose, debug, environ)
    logger = logging.getLogger('swayctl')
    logger.handlers.clear()
    logger.setLevel(level)

    if level <= logging.DEBUG:
        log_format = FORMATS[logging.DEBUG]
    elif level <= logging.INFO:
        log_format = FORMATS[logging.INFO]
    else:
        log_format = FORMATS[logging.WARNING]

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    formatter_cls = LevelColorFormatter if use_color(sys.stderr) else logging.Formatter
    handler.setFormatter(formatter_cls(log_format))
    logger.addHandler(handler)

    return logger


def _excerpt(output) -> str:
    text = output if isinstance(output, str) else output.decode(errors="replace")
    text = text.strip()
    if len(text) > OUTPUT_EXCERPT:
        return f"{text[:OUTPUT_EXCERPT]}... ({len(text)} chars)"
    return text


def log_control_call(argv: Sequence[str], result: subprocess.CompletedProcess,
                     logger: logging.Logger) -> None:
    """Trace one control binary run at DEBUG: argv, exit status, output excerpts."""
    if not logger.isEnabledFor(logging.DEBUG):
        return

    binary, *arguments = argv
    logger.debug(f"{os.path.basename(binary)} {' '.join(arguments)} -> exit {result.returncode}")
    if result.stdout:
        logger.debug(f"  stdout: {_excerpt(result.stdout)}")
    if result.stderr and _excerpt(result.stderr):
        logger.debug(f"  stderr: {_excerpt(result.stderr)}")


@contextmanager
def timed(operation: str, logger: logging.Logger) -> Iterator[None]:
    """Log how long a CLI command took, including when it fails.

    Examples:
        >>> with timed("swayctl tree", logger):
        ...     client.get_tree()
        INFO: swayctl tree took 15.32ms
    """
    start = time.perf_counter()
    logger.debug(f"{operation}: started")
    ok = False
    try:
        yield
        ok = True
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        outcome = "took" if ok else "failed after"
        logger.info(f"{operation} {outcome} {elapsed_ms:.2f}ms")
