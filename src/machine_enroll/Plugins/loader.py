from logging import getLogger
from typing import TYPE_CHECKING

from machine_enroll.Plugins.base import RegistryPlugin
from machine_enroll.Plugins.registry.memory import MemoryRegistryPlugin
from machine_enroll.Plugins.registry.yaml import YamlRegistryPlugin

if TYPE_CHECKING:
    from machine_enroll.config import Settings

logger = getLogger(__name__)

REGISTRY_PLUGINS: dict[str, type[RegistryPlugin]] = {
    "memory": MemoryRegistryPlugin,
    "yaml": YamlRegistryPlugin,
}


def load_registry(settings: "Settings") -> RegistryPlugin:
    """Instantiate the registry named by ``settings.registry_plugin``.

    :raises ValueError: If the plugin name is unknown
    """
    plugin_name = settings.registry_plugin
    plugin_class = REGISTRY_PLUGINS.get(plugin_name)
    if plugin_class is None:
        raise ValueError(
            f"Unknown registry plugin '{plugin_name}'. "
            f"Available plugins: {', '.join(REGISTRY_PLUGINS)}"
        )

    plugin_settings = plugin_class.settings_class() if plugin_class.settings_class else None
    logger.info(f"Using '{plugin_name}' machine registry")
    return plugin_class(plugin_settings, settings)
