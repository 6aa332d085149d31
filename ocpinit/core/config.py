"""Version pins used when rewriting scaffolded image references."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ScaffoldSettings:
    """Downstream versions written into scaffolded projects.

    Attributes:
        ocp_product_version: Current OCP release, used for openshift4 image tags (default: 4.14)
        ubi_minimal_version: Tag for ubi8/ubi-minimal and ubi8/ubi-micro images (default: 8.8)
        golang_builder_version: Minimum Go builder image tag (default: 1.20)
        x_net_version: Minimum golang.org/x/net module version (default: v0.17.0)
    """

    ocp_product_version: str = "4.14"
    ubi_minimal_version: str = "8.8"

    # CVE-2023-44487 / CVE-2023-39325 require Go 1.20+ and x/net v0.17.0
    golang_builder_version: str = "1.20"
    x_net_version: str = "v0.17.0"


_settings: Optional[ScaffoldSettings] = None


def get_settings() -> ScaffoldSettings:
    """Get the active scaffold settings.

    Returns:
        ScaffoldSettings instance (defaults if never set)
    """
    global _settings
    if _settings is None:
        _settings = ScaffoldSettings()
    return _settings


def set_settings(settings: Optional[ScaffoldSettings]):
    """Replace the active scaffold settings.

    Args:
        settings: ScaffoldSettings to use, or None to restore defaults
    """
    global _settings
    _settings = settings
