"""Machine registry plugin system."""

from machine_enroll.Plugins.base import PluginSettings, RegistryPlugin

__all__ = [
    "PluginSettings",
    "RegistryPlugin",
]
