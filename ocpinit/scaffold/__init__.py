"""Post-init scaffolding for OpenShift projects.

Rewrites upstream image references in a freshly generated project to their
downstream equivalents and records the plugin in the PROJECT file.
"""

from .filesystem import FileInfo, Filesystem, LocalFilesystem, MemoryFilesystem
from .init import PLUGIN_KEY, InitSubcommand, PluginConfig
from .substitutions import (
    IMAGE_SUBSTITUTIONS,
    Substitution,
    SubstitutionTable,
    build_image_substitutions,
    replace_images,
)

__all__ = [
    "FileInfo",
    "Filesystem",
    "LocalFilesystem",
    "MemoryFilesystem",
    "PLUGIN_KEY",
    "InitSubcommand",
    "PluginConfig",
    "IMAGE_SUBSTITUTIONS",
    "Substitution",
    "SubstitutionTable",
    "build_image_substitutions",
    "replace_images",
]
