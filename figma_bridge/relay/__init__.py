from .server import create_app
from .channels import ChannelRegistry

__all__ = ["ChannelRegistry", "create_app"]
