"""Config package exporting loader helpers."""

from .loader import Settings, StorageConfig, load_settings

__all__ = ["Settings", "StorageConfig", "load_settings"]
