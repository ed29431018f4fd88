"""Core modules for the Nexus Store Discord bot."""

from .config import AdminPolicy, Config, load_config
from .database import Database
from .store import StoreError, StoreGateway

__all__ = [
    "AdminPolicy",
    "Config",
    "load_config",
    "Database",
    "StoreError",
    "StoreGateway",
]
