"""Configuration management for dbmeta."""
from .runtime import Settings, settings
from .credentials import AdminCredentials

__all__ = [
    "Settings",
    "settings",
    "AdminCredentials",
]
