from .bridge import FigmaBridge
from .router import MessageRouter
from .session import ChannelSession
from .executor import CommandExecutor
from .connection import ConnectionManager
from .correlator import RequestCorrelator

__all__ = [
    "ChannelSession",
    "CommandExecutor",
    "ConnectionManager",
    "FigmaBridge",
    "MessageRouter",
    "RequestCorrelator",
]
