"""OpenShift init subcommand: runs after the base scaffold has been written."""
from dataclasses import dataclass
from typing import List, Optional

from ocpinit.core.logger import get_logger
from ocpinit.errors import MarkerPersistError, ProjectConfigError, UnsupportedFieldError
from ocpinit.project import ProjectConfig
from ocpinit.scaffold.filesystem import Filesystem
from ocpinit.scaffold.substitutions import SubstitutionTable, replace_images

logger = get_logger(__name__)

PLUGIN_NAME = "openshift.sdk.operatorframework.io"
PLUGIN_VERSION = "v1"
# Stable across releases so re-running init never duplicates the entry
PLUGIN_KEY = f"{PLUGIN_NAME}/{PLUGIN_VERSION}"


@dataclass
class PluginConfig:
    """Marker recorded in the project config; carries no fields yet."""


class InitSubcommand:
    """Updates a newly initialized project with OpenShift-specific configuration."""

    def __init__(self, table: Optional[SubstitutionTable] = None):
        self.table = table
        self.config: Optional[ProjectConfig] = None

    def inject_config(self, config: ProjectConfig) -> None:
        self.config = config

    def scaffold(self, fs: Filesystem) -> List[str]:
        """Swap upstream images for downstream ones and record the plugin.

        Args:
            fs: Filesystem holding the generated project

        Returns:
            Paths rewritten by the image substitutions

        Raises:
            SubstitutionError: Reading, stat-ing or writing a target file failed
            MarkerPersistError: The plugin marker could not be stored
        """
        if self.config is None:
            raise MarkerPersistError(PLUGIN_KEY, RuntimeError("no project config injected"))

        written = replace_images(fs, self.table)

        try:
            self.config.encode_plugin_config(PLUGIN_KEY, PluginConfig())
        except UnsupportedFieldError:
            logger.debug(f"Project version {self.config.version} has no plugin metadata; skipping {PLUGIN_KEY}")
        except (ProjectConfigError, OSError) as e:
            raise MarkerPersistError(PLUGIN_KEY, e) from e

        return written
