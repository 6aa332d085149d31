"""Upstream-to-downstream image substitutions for scaffolded projects."""
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from ocpinit.core.config import ScaffoldSettings, get_settings
from ocpinit.core.logger import get_logger
from ocpinit.errors import ReadError, StatError, WriteError
from ocpinit.scaffold.filesystem import Filesystem

logger = get_logger(__name__)

AUTH_PROXY_PATCH = "config/default/manager_auth_proxy_patch.yaml"
DOCKERFILE = "Dockerfile"
GO_MOD = "go.mod"


@dataclass(frozen=True)
class Substitution:
    """A regex whose every match in a file is replaced by fixed text."""

    pattern: "re.Pattern[bytes]"
    replacement: bytes

    @classmethod
    def compile(cls, pattern: str, replacement: str) -> "Substitution":
        """Build a substitution, failing fast on an invalid pattern."""
        return cls(re.compile(pattern.encode()), replacement.encode())

    def apply(self, content: bytes) -> bytes:
        """Replace all non-overlapping matches, left to right.

        The replacement is inserted literally; backslashes and group
        references in it are not expanded.
        """
        return self.pattern.sub(lambda _match: self.replacement, content)


class SubstitutionTable:
    """Immutable mapping of relative file path to ordered substitutions."""

    def __init__(self, entries: Mapping[str, Sequence[Substitution]]):
        self._entries = MappingProxyType({path: tuple(rules) for path, rules in entries.items()})

    def rules_for(self, path: str) -> Tuple[Substitution, ...]:
        """Return the rules for an exact relative path, or () if none."""
        return self._entries.get(path, ())

    def paths(self) -> List[str]:
        return list(self._entries)

    def __iter__(self) -> Iterator[Tuple[str, Tuple[Substitution, ...]]]:
        return iter(self._entries.items())


def build_image_substitutions(settings: Optional[ScaffoldSettings] = None) -> SubstitutionTable:
    """Build the table of downstream image and version substitutions.

    Args:
        settings: Version pins to write (defaults to get_settings())

    Returns:
        SubstitutionTable keyed by project-relative path
    """
    settings = settings or get_settings()
    ocp = settings.ocp_product_version
    ubi = settings.ubi_minimal_version
    golang = settings.golang_builder_version

    entries: Dict[str, List[Substitution]] = {
        AUTH_PROXY_PATCH: [
            Substitution.compile(
                r"gcr.io/kubebuilder/kube-rbac-proxy:[^ \n]+",
                f"registry.redhat.io/openshift4/ose-kube-rbac-proxy:v{ocp}",
            ),
        ],
        DOCKERFILE: [
            # Ansible
            Substitution.compile(
                r"quay.io/operator-framework/ansible-operator:[^ \n]+",
                f"registry.redhat.io/openshift4/ose-ansible-operator:v{ocp}",
            ),
            # Helm
            Substitution.compile(
                r"quay.io/operator-framework/helm-operator:[^ \n]+",
                f"registry.redhat.io/openshift4/ose-helm-operator:v{ocp}",
            ),
            # Go
            Substitution.compile(
                r"gcr.io/distroless/static:[^ \n]+",
                f"registry.access.redhat.com/ubi8/ubi-minimal:{ubi}",
            ),
            # Go builder image, CVE-2023-44487 and CVE-2023-39325.
            # Drop once the upstream scaffolds default to Go 1.20+.
            Substitution.compile(r"golang:[^ \n]+", f"golang:{golang}"),
            # Hybrid Helm
            Substitution.compile(
                r"registry.access.redhat.com/ubi8/ubi-micro:[^ \n]+",
                f"registry.access.redhat.com/ubi8/ubi-micro:{ubi}",
            ),
        ],
        GO_MOD: [
            # Same CVEs: x/net must be at least v0.17.0
            Substitution.compile(
                r"golang.org/x/net [^ \n]+",
                f"golang.org/x/net {settings.x_net_version}",
            ),
            # Anything below go 1.2x is raised; 1.2x lines never match
            Substitution.compile(r"go 1.[^2\n]+", f"go {golang}"),
        ],
    }
    return SubstitutionTable(entries)


IMAGE_SUBSTITUTIONS = build_image_substitutions(ScaffoldSettings())


def replace_images(fs: Filesystem, table: Optional[SubstitutionTable] = None) -> List[str]:
    """Replace upstream images with their downstream (OpenShift) equivalents.

    Each table entry is read, rewritten and written back with its original
    mode. The first failure aborts the run; files already written stay
    modified.

    Args:
        fs: Filesystem holding the freshly scaffolded project
        table: Substitutions to apply (defaults to IMAGE_SUBSTITUTIONS)

    Returns:
        Paths that were written

    Raises:
        ReadError: A target file is missing or unreadable
        StatError: A target file's mode cannot be read
        WriteError: A target file cannot be written back
    """
    table = table if table is not None else IMAGE_SUBSTITUTIONS
    written = []

    for path, rules in table:
        try:
            content = fs.read_file(path)
        except OSError as e:
            raise ReadError(path, e) from e

        try:
            info = fs.stat(path)
        except OSError as e:
            raise StatError(path, e) from e

        for rule in rules:
            content = rule.apply(content)

        try:
            fs.write_file(path, content, info.mode)
        except OSError as e:
            raise WriteError(path, e) from e

        logger.debug(f"Applied {len(rules)} substitution(s) to {path}")
        written.append(path)

    logger.info(f"Replaced upstream images in {len(written)} file(s)")
    return written
