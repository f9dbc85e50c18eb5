"""Built-in plugins for gitgate."""

from gitgate.plugins.builtin.check_content import CheckContentPlugin
from gitgate.plugins.builtin.check_file import CheckFilePlugin
from gitgate.plugins.builtin.check_log import CheckLogPlugin
from gitgate.plugins.builtin.check_reference import CheckReferencePlugin

BUILTIN_PLUGINS = [
    CheckContentPlugin,
    CheckFilePlugin,
    CheckLogPlugin,
    CheckReferencePlugin,
]

__all__ = [
    "BUILTIN_PLUGINS",
    "CheckContentPlugin",
    "CheckFilePlugin",
    "CheckLogPlugin",
    "CheckReferencePlugin",
]
