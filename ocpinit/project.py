"""Project configuration document (the PROJECT file) and plugin metadata."""
import dataclasses
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ocpinit.core.logger import get_logger
from ocpinit.errors import PluginKeyNotFoundError, ProjectConfigError, UnsupportedFieldError

logger = get_logger(__name__)

PROJECT_FILE = "PROJECT"
SUPPORTED_VERSIONS = ("2", "3")
# Declared optional fields dropped from the document when unset
OMIT_WHEN_NONE = ("domain", "repo", "projectName")


class ProjectConfig(BaseModel):
    """Persisted project configuration.

    Version 2 documents predate per-plugin metadata; only version 3 has a
    ``plugins`` section.
    """

    model_config = ConfigDict(extra='allow', populate_by_name=True)

    version: str = "3"
    domain: Optional[str] = None
    repo: Optional[str] = None
    project_name: Optional[str] = Field(None, alias="projectName")
    layout: List[str] = Field(default_factory=list)
    plugins: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

    @field_validator('version', mode='before')
    @classmethod
    def validate_version(cls, value: Any) -> str:
        """Accept 2/3 as int or string; reject anything else."""
        version = str(value).strip('"')
        if version not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"unsupported project version {value!r} (expected one of {', '.join(SUPPORTED_VERSIONS)})"
            )
        return version

    @field_validator('layout', mode='before')
    @classmethod
    def validate_layout(cls, value: Any) -> List[str]:
        # v2/early v3 documents store a single layout string
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator('plugins', mode='before')
    @classmethod
    def validate_plugins(cls, value: Any) -> Dict[str, Any]:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            # A key written with no value is an empty plugin config
            return {k: (v if v is not None else {}) for k, v in value.items()}
        return value

    def encode_plugin_config(self, key: str, payload: Any) -> None:
        """Store a plugin's configuration under its key.

        Args:
            key: Plugin identity key (e.g. "openshift.sdk.operatorframework.io/v1")
            payload: Dataclass instance or mapping; an existing entry is replaced

        Raises:
            UnsupportedFieldError: The document version has no plugins section
            ProjectConfigError: The payload cannot be represented as a mapping
        """
        if self.version == "2":
            raise UnsupportedFieldError(self.version, "plugins")

        if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
            data = dataclasses.asdict(payload)
        elif isinstance(payload, Mapping):
            data = dict(payload)
        else:
            raise ProjectConfigError(
                f"plugin config for {key} must be a dataclass or mapping, got {type(payload).__name__}"
            )

        self.plugins[key] = data
        logger.debug(f"Encoded plugin config for {key}")

    def decode_plugin_config(self, key: str) -> Dict[str, Any]:
        """Return the stored configuration for a plugin key.

        Raises:
            UnsupportedFieldError: The document version has no plugins section
            PluginKeyNotFoundError: Nothing is stored under key
        """
        if self.version == "2":
            raise UnsupportedFieldError(self.version, "plugins")
        if key not in self.plugins:
            raise PluginKeyNotFoundError(key)
        return dict(self.plugins[key])

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form using on-disk key names.

        Unset declared fields are omitted; keys owned by other tools are
        written back as loaded, null values included.
        """
        data = self.model_dump(by_alias=True)
        for key in OMIT_WHEN_NONE:
            if data.get(key) is None:
                data.pop(key, None)
        if not data.get("plugins") or self.version == "2":
            data.pop("plugins", None)
        if self.version == "2" and self.layout:
            data["layout"] = self.layout[0]
        if not data.get("layout"):
            data.pop("layout", None)
        return data

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)

    @classmethod
    def from_yaml(cls, text: str) -> "ProjectConfig":
        """Parse a PROJECT document.

        Raises:
            ProjectConfigError: Invalid YAML or schema
        """
        try:
            raw = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ProjectConfigError(f"invalid project file: {e}") from e

        if not raw:
            raise ProjectConfigError("project file is empty")
        if not isinstance(raw, dict):
            raise ProjectConfigError("project file must be a mapping")

        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise ProjectConfigError(f"invalid project file: {e}") from e

    @classmethod
    def load(cls, path: Union[str, Path]) -> "ProjectConfig":
        """Load a PROJECT file from disk."""
        path = Path(path)
        if not path.exists():
            raise ProjectConfigError(f"project file not found: {path}")
        return cls.from_yaml(path.read_text())

    def save(self, path: Union[str, Path]) -> None:
        """Write the document back to disk."""
        path = Path(path)
        try:
            path.write_text(self.to_yaml())
        except OSError as e:
            raise ProjectConfigError(f"failed to write project file {path}: {e}") from e
        logger.debug(f"Saved project config to {path}")
