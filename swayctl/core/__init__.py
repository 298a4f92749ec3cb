# Socket discovery, process invocation and response handling

from .client import ControlClient
from .invoker import ProcessInvoker, Sink, SinkKind
from .protocol import handle_error, interpret
from .socket_resolver import SessionContext, SocketResolver, resolve_socket

__all__ = [
    "ControlClient",
    "ProcessInvoker",
    "Sink",
    "SinkKind",
    "handle_error",
    "interpret",
    "SessionContext",
    "SocketResolver",
    "resolve_socket",
]
