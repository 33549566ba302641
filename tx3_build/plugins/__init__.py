from tx3_build.plugins.build import Tx3BuildPlugin
from tx3_build.plugins.dev_server import Tx3DevServerPlugin, DevServerSession

__all__ = ["Tx3BuildPlugin", "Tx3DevServerPlugin", "DevServerSession"]
