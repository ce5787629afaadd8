"""
Resource alias resolution.

Maps the short names accepted on the command line (pr, taskruns,
pipelineruns.tekton.dev, ...) to the group/version/kind that records are
typed with, then applies the configured version compatibility policy.
"""

import logging
import re
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Optional, Tuple

from ...config.provider import VersionOverride
from ...errors import ConfigurationError

logger = logging.getLogger(__name__)

_VERSION = re.compile(r"^v\d+((alpha|beta)\d+)?$")


@dataclass(frozen=True)
class GroupVersionKind:
    """Fully qualified Kubernetes type."""

    group: str
    version: str
    kind: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @property
    def data_type(self) -> str:
        """Type tag of records holding this kind, e.g. tekton.dev/v1beta1.PipelineRun."""
        return f"{self.api_version}.{self.kind}"

    def with_version(self, version: str) -> "GroupVersionKind":
        return replace(self, version=version)


@dataclass(frozen=True)
class ResourceType:
    """A resource the resolver knows about."""

    plural: str
    gvk: GroupVersionKind
    aliases: Tuple[str, ...] = ()

    def names(self) -> Iterable[str]:
        yield self.plural
        yield self.gvk.kind.lower()
        yield from self.aliases


DEFAULT_RESOURCES: Tuple[ResourceType, ...] = (
    ResourceType(
        plural="pipelineruns",
        gvk=GroupVersionKind("tekton.dev", "v1", "PipelineRun"),
        aliases=("pr", "prs"),
    ),
    ResourceType(
        plural="taskruns",
        gvk=GroupVersionKind("tekton.dev", "v1", "TaskRun"),
        aliases=("tr", "trs"),
    ),
)


class ResourceResolver:
    """
    Resolves resource aliases without contacting a cluster.

    Accepted forms: ``<alias>``, ``<alias>.<group>`` and
    ``<alias>.<version>.<group>``, case-insensitive.
    """

    def __init__(
        self,
        version_override: Optional[VersionOverride] = None,
        resources: Iterable[ResourceType] = DEFAULT_RESOURCES,
    ):
        """
        Initialize resolver.

        Args:
            version_override: Compatibility policy applied to every result;
                None leaves resolved versions untouched
            resources: Known resource types
        """
        self.version_override = version_override or VersionOverride(enabled=False)
        self._by_name: Dict[str, ResourceType] = {}
        for resource in resources:
            for name in resource.names():
                self._by_name[name.lower()] = resource

    def resolve(self, alias: str) -> GroupVersionKind:
        """
        Resolve an alias to a group/version/kind.

        Raises:
            ConfigurationError: If the alias or its qualifiers are unknown
        """
        raw = alias.strip().lower()
        name, _, qualifier = raw.partition(".")
        resource = self._by_name.get(name)
        if resource is None:
            raise ConfigurationError(f'the server doesn\'t have a resource type "{alias}"')

        gvk = resource.gvk
        if qualifier:
            version, _, group = qualifier.partition(".")
            if not (_VERSION.match(version) and group):
                version, group = "", qualifier
            if group != gvk.group:
                raise ConfigurationError(f'the server doesn\'t have a resource type "{alias}"')
            if version:
                gvk = gvk.with_version(version)

        resolved = gvk.with_version(self.version_override.apply(gvk.version))
        if resolved != gvk:
            logger.debug(f"Version override: {gvk.api_version} -> {resolved.api_version}")
        return resolved
