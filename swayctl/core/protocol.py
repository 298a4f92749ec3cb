"""Batch response interpretation and the command error policy.

Failure severity is chosen by the caller through ``on_error``:

- ``None`` or ``"raise"``: raise CommandError (ParseError when the control
  process could not parse a sub-command)
- ``"ignore"``: log the report and return None
- a callable: receives the report text; its return value becomes the result
"""

import json
import logging
from typing import Any, BinaryIO, Callable, Optional, Union

from ..errors import CommandError, ParseError, ResponseFormatError
from ..models.response import BatchResponse, StatusEntry


logger = logging.getLogger('swayctl.protocol')

PARSE_MARKER = "[parse error]"
IGNORE = "ignore"
RAISE = "raise"

ErrorHandler = Union[None, str, Callable[[str], Any]]


def decode_json(stream: BinaryIO) -> Any:
    """Decode a control binary's output. Used as a transform sink.

    Raises:
        ResponseFormatError: If the output is not valid JSON
    """
    raw = stream.read()
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ResponseFormatError(f"invalid JSON ({e})", raw.decode(errors="replace"))


def format_entry(entry: StatusEntry) -> str:
    """One report line: `` -<marker> <message>``."""
    marker = PARSE_MARKER if entry.parse_error else ""
    message = entry.error or f"no error message in response: {entry.raw()}"
    return f" -{marker} {message}"


def format_report(message: str, batch: BatchResponse) -> str:
    """Header naming the sent message, then one line per failed entry in order."""
    lines = [f"Sway command failed: {message}"]
    lines.extend(format_entry(entry) for entry in batch.failures)
    return "\n".join(lines)


def interpret(message: str, parsed_json: Any) -> Optional[str]:
    """Check a decoded batch response.

    Args:
        message: The message that was sent
        parsed_json: Decoded output of the control binary

    Returns:
        None if every entry succeeded, otherwise the error report text

    Raises:
        ResponseFormatError: If parsed_json is not a batch of status objects

    Examples:
        >>> interpret("focus left", [{"success": True}]) is None
        True
        >>> print(interpret("a; b", [{"success": True}, {"success": False, "error": "x"}]))
        Sway command failed: a; b
         - x
    """
    batch = parsed_json if isinstance(parsed_json, BatchResponse) else BatchResponse.from_json(parsed_json)
    if batch.success:
        return None
    return format_report(message, batch)


def validate_policy(on_error: ErrorHandler) -> None:
    """Reject anything that is not None, "raise", "ignore" or a callable.

    Raises:
        ValueError: For an unknown policy
    """
    if on_error is None or on_error in (RAISE, IGNORE) or callable(on_error):
        return
    raise ValueError(f"Unknown error policy: {on_error!r}")


def handle_error(report: str, on_error: ErrorHandler = None, parse_error: bool = False) -> Any:
    """Apply the caller's error policy to a failure report.

    Args:
        report: Formatted report from ``interpret``
        on_error: None/"raise", "ignore", or a callable taking the report
        parse_error: Raise ParseError instead of CommandError

    Returns:
        None for "ignore", the callable's result otherwise

    Raises:
        CommandError: For the default policy
        ValueError: For an unknown policy
    """
    validate_policy(on_error)

    if on_error is None or on_error == RAISE:
        logger.error(report)
        if parse_error:
            raise ParseError(report)
        raise CommandError(report)

    if on_error == IGNORE:
        logger.warning(report)
        return None

    logger.debug("Passing command failure to custom handler")
    return on_error(report)
