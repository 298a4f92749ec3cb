"""Run a control binary and route its standard output into a sink.

The control socket is handed to the child through a per-invocation
environment that contains exactly one variable. The process-wide environment
is never touched, so overlapping calls from several threads cannot see each
other's socket.
"""

import io
import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Callable, Optional

from ..errors import ErrorCode, ProcessLaunchError
from ..logging_config import log_control_call
from .socket_resolver import DEFAULT_SOCKET_ENV_VAR, SocketResolver


logger = logging.getLogger('swayctl.invoker')

DEFAULT_TIMEOUT = 10.0


class SinkKind(str, Enum):
    """Where the output of a control binary goes."""

    APPEND = "append"
    TRANSFORM = "transform"
    DISCARD = "discard"


@dataclass(frozen=True)
class Sink:
    """Output destination for one invocation.

    Build one with ``Sink.append``, ``Sink.transform`` or ``Sink.discard``.

    Example:
        >>> import json
        >>> sink = Sink.transform(json.load)
        >>> sink.kind
        <SinkKind.TRANSFORM: 'transform'>
    """

    kind: SinkKind
    handle: Optional[BinaryIO] = None
    callback: Optional[Callable[[BinaryIO], Any]] = None

    @classmethod
    def append(cls, handle: BinaryIO) -> "Sink":
        """Append output to a caller-owned binary stream and return it."""
        return cls(SinkKind.APPEND, handle=handle)

    @classmethod
    def transform(cls, callback: Callable[[BinaryIO], Any]) -> "Sink":
        """Pass a scratch buffer holding the output to ``callback``."""
        return cls(SinkKind.TRANSFORM, callback=callback)

    @classmethod
    def discard(cls) -> "Sink":
        """Drop the output."""
        return cls(SinkKind.DISCARD)


class ProcessInvoker:
    """Runs control binaries against the resolved control socket."""

    def __init__(
        self,
        resolver: Optional[SocketResolver] = None,
        env_var: str = DEFAULT_SOCKET_ENV_VAR,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """Initialize invoker.

        Args:
            resolver: Socket resolver consulted on every call
            env_var: Variable the control binary reads the socket path from
            timeout: Seconds to wait for the binary before giving up
        """
        self.resolver = resolver or SocketResolver(env_var=env_var)
        self.env_var = env_var
        self.timeout = timeout

    def build_environment(self, socket_path: str) -> dict:
        """Environment for the child: the socket variable and nothing else."""
        return {self.env_var: socket_path}

    def invoke(self, binary: str, argument: str, sink: Optional[Sink] = None) -> Any:
        """Run ``binary argument`` and deliver its stdout to ``sink``.

        Args:
            binary: Path of the control binary
            argument: Single command-line argument (message or query flag)
            sink: Output destination (default: discard)

        Returns:
            The caller's handle for APPEND, the callback's result for
            TRANSFORM, None for DISCARD

        Raises:
            SocketNotFound: If no control socket can be resolved
            ProcessLaunchError: If the binary cannot run or exits abnormally
        """
        if sink is None:
            sink = Sink.discard()

        socket_path = self.resolver.resolve()
        output = self._run(binary, argument, socket_path)

        match sink.kind:
            case SinkKind.APPEND:
                sink.handle.write(output)
                return sink.handle

            case SinkKind.TRANSFORM:
                buffer = io.BytesIO()
                try:
                    buffer.write(output)
                    buffer.seek(0)
                    return sink.callback(buffer)
                finally:
                    buffer.close()

            case SinkKind.DISCARD:
                return None

    def _run(self, binary: str, argument: str, socket_path: str) -> bytes:
        cmd = [binary, argument]
        logger.debug(f"Running {binary} with {self.env_var}={socket_path}")

        try:
            result = subprocess.run(
                cmd,
                env=self.build_environment(socket_path),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.error(f"{binary} timed out after {self.timeout}s")
            raise ProcessLaunchError(
                binary,
                f"timed out after {self.timeout}s",
                code=ErrorCode.PROCESS_TIMEOUT,
            )
        except OSError as e:
            logger.error(f"Failed to launch {binary}: {e}")
            raise ProcessLaunchError(binary, str(e))

        log_control_call(cmd, result, logger)
        stderr = result.stderr.decode(errors="replace").strip()

        if result.returncode < 0:
            raise ProcessLaunchError(
                binary,
                f"killed by signal {-result.returncode}",
                code=ErrorCode.PROCESS_EXITED_ABNORMALLY,
                returncode=result.returncode,
                stderr=stderr,
            )

        # A failing sub-command makes the binary exit non-zero while still
        # printing the JSON batch; only treat silent failures as abnormal.
        if result.returncode != 0 and not result.stdout.strip():
            raise ProcessLaunchError(
                binary,
                f"exited with status {result.returncode}" + (f": {stderr}" if stderr else ""),
                code=ErrorCode.PROCESS_EXITED_ABNORMALLY,
                returncode=result.returncode,
                stderr=stderr,
            )

        return result.stdout
