"""
Error taxonomy for swayctl.

Socket discovery and process launch failures always propagate. Command-level
failures (CommandError and its ParseError subclass) are the only errors that
go through the caller-selectable ``on_error`` policy.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """
    Error codes for swayctl.

    - 1100-1199: Configuration errors
    - 1400-1499: Control socket / process errors
    - 1600-1699: Command response errors
    """

    # Configuration errors (1100-1199)
    CONFIG_LOAD_FAILED = 1100
    BINARY_NOT_FOUND = 1101

    # Control socket / process errors (1400-1499)
    SOCKET_NOT_FOUND = 1400
    PROCESS_LAUNCH_FAILED = 1401
    PROCESS_TIMEOUT = 1402
    PROCESS_EXITED_ABNORMALLY = 1403

    # Command response errors (1600-1699)
    COMMAND_FAILED = 1600
    COMMAND_PARSE_ERROR = 1601
    INVALID_RESPONSE = 1602


class SwayctlError(Exception):
    """Base exception for swayctl errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize swayctl error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to a JSON-serializable dictionary.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class SocketNotFound(SwayctlError):
    """No candidate control socket passed validation."""

    MESSAGE = "Could not find a sway control socket"

    def __init__(self, tried: Optional[Dict[str, Optional[str]]] = None):
        super().__init__(
            code=ErrorCode.SOCKET_NOT_FOUND,
            message=self.MESSAGE,
            suggestion="Ensure sway is running and SWAYSOCK points at its IPC socket",
            context={"tried": tried or {}}
        )


class ProcessLaunchError(SwayctlError):
    """The control binary could not be started or exited abnormally."""

    def __init__(
        self,
        binary: str,
        reason: str,
        code: ErrorCode = ErrorCode.PROCESS_LAUNCH_FAILED,
        returncode: Optional[int] = None,
        stderr: str = ""
    ):
        """
        Initialize process launch error.

        Args:
            binary: Path of the binary that failed
            reason: Reason for failure
            code: PROCESS_LAUNCH_FAILED, PROCESS_TIMEOUT or PROCESS_EXITED_ABNORMALLY
            returncode: Exit status, if the process ran at all
            stderr: Captured standard error, if any
        """
        context: Dict[str, Any] = {"binary": binary, "reason": reason}
        if returncode is not None:
            context["returncode"] = returncode
        if stderr:
            context["stderr"] = stderr

        super().__init__(
            code=code,
            message=f"Failed to run {binary}: {reason}",
            suggestion="Check that the control binary is installed and sway is responsive",
            context=context
        )
        self.binary = binary
        self.returncode = returncode
        self.stderr = stderr


class CommandError(SwayctlError):
    """One or more sub-commands in a batch reported failure."""

    def __init__(self, report: str, code: ErrorCode = ErrorCode.COMMAND_FAILED):
        super().__init__(code=code, message=report)
        self.report = report


class ParseError(CommandError):
    """The control process could not parse at least one sub-command."""

    def __init__(self, report: str):
        super().__init__(report, code=ErrorCode.COMMAND_PARSE_ERROR)


class ResponseFormatError(SwayctlError):
    """Control binary output was not JSON of the expected shape."""

    def __init__(self, reason: str, output: str = ""):
        super().__init__(
            code=ErrorCode.INVALID_RESPONSE,
            message=f"Unexpected response from control binary: {reason}",
            context={"output": output[:500]} if output else None
        )


class ConfigurationError(SwayctlError):
    """Configuration could not be loaded or a binary could not be located."""

    def __init__(self, code: ErrorCode, message: str, suggestion: Optional[str] = None):
        super().__init__(code=code, message=message, suggestion=suggestion)
