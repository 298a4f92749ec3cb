"""Control client for the window manager's control binaries.

Each operation resolves the control socket, runs one control binary
synchronously and interprets its JSON output:

- run_commands: send ``;``-joined commands, check the status batch
- get_tree: fetch the window/workspace tree
- get_version: query the secondary binary for (major, minor, patch)
"""

import logging
from typing import Any, Iterable, Optional, Tuple, Union

from ..config import ClientConfig
from ..errors import ResponseFormatError
from ..models.response import BatchResponse
from ..models.tree import Node, list_windows
from .invoker import ProcessInvoker, Sink
from .protocol import ErrorHandler, decode_json, format_report, handle_error, validate_policy
from .socket_resolver import SessionContext, SocketResolver


logger = logging.getLogger('swayctl.client')

VERSION_FIELDS = ("major", "minor", "patch")


class ControlClient:
    """Synchronous client for sway-style control binaries.

    Example:
        ```python
        client = ControlClient(ClientConfig.load().resolve_binaries())
        client.run_commands("workspace 2; focus left")
        windows = client.list_windows(visible_only=True)
        ```
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        session: Optional[SessionContext] = None,
        invoker: Optional[ProcessInvoker] = None,
    ):
        """Initialize client.

        Args:
            config: Binary paths, socket variable and timeout
            session: Host session context consulted for the socket
            invoker: Invoker to use instead of one built from config
        """
        self.config = config or ClientConfig()
        self.session = session or SessionContext.empty()
        if invoker is None:
            resolver = SocketResolver(
                self.session,
                env_var=self.config.socket_env_var,
                surface_attribute=self.config.surface_attribute,
            )
            invoker = ProcessInvoker(
                resolver,
                env_var=self.config.socket_env_var,
                timeout=self.config.timeout,
            )
        self.invoker = invoker

    def socket_path(self) -> str:
        """Resolve the control socket the next call would use."""
        return self.invoker.resolver.resolve()

    def run_commands(
        self,
        message: Union[str, Iterable[str]],
        on_error: ErrorHandler = None,
    ) -> Any:
        """Send one or more commands.

        Args:
            message: Command string, possibly ``;``-joined, or a list of commands
            on_error: Error policy for failed sub-commands (see protocol.handle_error)

        Returns:
            True if every sub-command succeeded, otherwise the policy's result

        Raises:
            CommandError: On failure with the default policy
            SocketNotFound, ProcessLaunchError, ResponseFormatError
            ValueError: If on_error is not a known policy
        """
        validate_policy(on_error)
        if not isinstance(message, str):
            message = "; ".join(message)

        logger.debug(f"RUN_COMMAND: {message}")
        parsed = self.invoker.invoke(self.config.command_binary, message, Sink.transform(decode_json))
        batch = BatchResponse.from_json(parsed)
        logger.debug(f"RUN_COMMAND completed: {len(batch) - len(batch.failures)}/{len(batch)} succeeded")

        if batch.success:
            return True
        return handle_error(format_report(message, batch), on_error, parse_error=batch.has_parse_error)

    def get_tree(self) -> Node:
        """Fetch the window/workspace tree.

        Raises:
            ResponseFormatError: If the output is not a tree object
        """
        logger.debug("IPC query: GET_TREE")
        parsed = self.invoker.invoke(
            self.config.command_binary,
            self.config.tree_query_argument,
            Sink.transform(decode_json),
        )
        if not isinstance(parsed, dict):
            raise ResponseFormatError(f"expected a tree object, got {type(parsed).__name__}")
        try:
            return Node.model_validate(parsed)
        except ValueError as e:
            raise ResponseFormatError(f"malformed tree: {e}")

    def get_version(self) -> Tuple[int, int, int]:
        """Query the secondary binary for its version.

        Returns:
            (major, minor, patch)

        Raises:
            ResponseFormatError: If a field is missing or not an integer
        """
        logger.debug("IPC query: GET_VERSION")
        parsed = self.invoker.invoke(
            self.config.version_binary,
            self.config.version_argument,
            Sink.transform(decode_json),
        )
        if not isinstance(parsed, dict):
            raise ResponseFormatError(f"expected a version object, got {type(parsed).__name__}")

        parts = []
        for field in VERSION_FIELDS:
            value = parsed.get(field)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ResponseFormatError(f"version field '{field}' is not an integer: {value!r}")
            parts.append(value)
        return tuple(parts)

    def list_windows(
        self,
        root: Optional[Node] = None,
        visible_only: bool = False,
        focused_only: bool = False,
        owned_only: bool = False,
        pid: Optional[int] = None,
    ) -> list:
        """Enumerate windows, fetching the tree first when root is omitted."""
        if root is None:
            root = self.get_tree()
        return list_windows(root, visible_only, focused_only, owned_only, pid)

    def focus_container(self, con_id: int, on_error: ErrorHandler = None) -> Any:
        """Focus the container with the given ID."""
        return self.run_commands(f"[con_id={con_id}] focus", on_error=on_error)
