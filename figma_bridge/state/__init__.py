from .stats import RouterStats
from .result import CommandResult
from .pending import PendingRequest
from .connection import ConnectionState
from .settings import BridgeSettings

__all__ = ["BridgeSettings", "CommandResult", "ConnectionState", "PendingRequest", "RouterStats"]
