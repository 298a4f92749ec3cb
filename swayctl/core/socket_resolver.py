"""Control socket discovery.

Candidates are tried in a fixed order and the first one that validates wins:

1. The session environment of the current surface
2. The ``sway-socket`` attribute stashed on the current surface. Some hosts
   do not propagate the session environment to surfaces spawned from
   existing ones, so the attribute is kept as a fallback.
3. The process-wide environment

The socket is re-resolved on every call; it can change between calls when
several sessions share one host process.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Tuple

from ..errors import SocketNotFound


logger = logging.getLogger('swayctl.socket_resolver')

DEFAULT_SOCKET_ENV_VAR = "SWAYSOCK"
DEFAULT_SURFACE_ATTRIBUTE = "sway-socket"


@dataclass(frozen=True)
class SessionContext:
    """Read-only socket sources supplied by the host for the current surface.

    Attributes:
        environment: Per-session environment of the active surface
        surface_attributes: Side-channel attributes stored on the surface
    """

    environment: Optional[Mapping[str, str]] = None
    surface_attributes: Optional[Mapping[str, Any]] = None

    @classmethod
    def empty(cls) -> "SessionContext":
        """Context for hosts with no per-surface state."""
        return cls()


def is_valid_socket(candidate: Optional[str]) -> bool:
    """Check that a candidate names a readable, non-directory entry.

    Examples:
        >>> is_valid_socket("")
        False
        >>> is_valid_socket("/")
        False
    """
    if not candidate:
        return False
    if not os.path.exists(candidate):
        return False
    if not os.access(candidate, os.R_OK):
        return False
    return not os.path.isdir(candidate)


def iter_candidates(
    session: SessionContext,
    environ: Mapping[str, str],
    env_var: str = DEFAULT_SOCKET_ENV_VAR,
    surface_attribute: str = DEFAULT_SURFACE_ATTRIBUTE,
) -> Iterator[Tuple[str, Optional[str]]]:
    """Yield (source, candidate) pairs in priority order."""
    environment = session.environment or {}
    yield "session environment", environment.get(env_var)

    attribute = (session.surface_attributes or {}).get(surface_attribute)
    yield "surface attribute", str(attribute) if attribute is not None else None

    yield "process environment", environ.get(env_var)


def resolve_socket(
    session: Optional[SessionContext] = None,
    environ: Optional[Mapping[str, str]] = None,
    env_var: str = DEFAULT_SOCKET_ENV_VAR,
    surface_attribute: str = DEFAULT_SURFACE_ATTRIBUTE,
) -> str:
    """Return the first candidate socket path that validates.

    Args:
        session: Host session context (default: empty)
        environ: Process-wide environment (default: os.environ)
        env_var: Name of the socket environment variable
        surface_attribute: Key of the surface side attribute

    Returns:
        Validated socket path

    Raises:
        SocketNotFound: If no candidate validates
    """
    if session is None:
        session = SessionContext.empty()
    if environ is None:
        environ = os.environ

    tried = {}
    for source, candidate in iter_candidates(session, environ, env_var, surface_attribute):
        tried[source] = candidate
        if candidate is None:
            continue
        if is_valid_socket(candidate):
            logger.debug(f"Using control socket from {source}: {candidate}")
            return candidate
        logger.debug(f"Rejected control socket from {source}: {candidate!r}")

    logger.error(SocketNotFound.MESSAGE)
    raise SocketNotFound(tried)


class SocketResolver:
    """Resolves the control socket for one client.

    Holds the sources, never the result: every ``resolve()`` call checks the
    candidates again.
    """

    def __init__(
        self,
        session: Optional[SessionContext] = None,
        environ: Optional[Mapping[str, str]] = None,
        env_var: str = DEFAULT_SOCKET_ENV_VAR,
        surface_attribute: str = DEFAULT_SURFACE_ATTRIBUTE,
    ):
        self.session = session or SessionContext.empty()
        self.environ = environ
        self.env_var = env_var
        self.surface_attribute = surface_attribute

    def resolve(self) -> str:
        """Resolve the socket path, raising SocketNotFound on failure."""
        return resolve_socket(
            self.session,
            self.environ,
            env_var=self.env_var,
            surface_attribute=self.surface_attribute,
        )
