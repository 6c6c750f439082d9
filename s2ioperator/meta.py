"""API group metadata, resource identifiers and object metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

GROUP_NAME = "devops.kubesphere.io"
VERSION = "v1alpha1"

RESOURCE_KIND_S2I_BUILDER = "S2iBuilder"
RESOURCE_SINGULAR_S2I_BUILDER = "s2ibuilder"
RESOURCE_PLURAL_S2I_BUILDER = "s2ibuilders"

RESOURCE_KIND_S2I_BUILDER_TEMPLATE = "S2iBuilderTemplate"
RESOURCE_SINGULAR_S2I_BUILDER_TEMPLATE = "s2ibuildertemplate"
RESOURCE_PLURAL_S2I_BUILDER_TEMPLATE = "s2ibuildertemplates"

RESOURCE_KIND_S2I_RUN = "S2iRun"
RESOURCE_SINGULAR_S2I_RUN = "s2irun"
RESOURCE_PLURAL_S2I_RUN = "s2iruns"


@dataclass(frozen=True)
class GroupResource:
    """A resource name qualified by its API group."""

    group: str
    resource: str

    def __str__(self) -> str:
        if not self.group:
            return self.resource
        return f"{self.resource}.{self.group}"


@dataclass(frozen=True)
class GroupVersionResource:
    """A resource name qualified by its API group and version."""

    group: str
    version: str
    resource: str

    def group_resource(self) -> GroupResource:
        """Drop the version, keeping group and resource."""
        return GroupResource(self.group, self.resource)

    def __str__(self) -> str:
        return f"{self.group}/{self.version}, Resource={self.resource}"


@dataclass(frozen=True)
class GroupVersion:
    """An API group together with one of its versions."""

    group: str
    version: str

    def with_resource(self, resource: str) -> GroupVersionResource:
        """Qualify ``resource`` with this group and version."""
        return GroupVersionResource(self.group, self.version, resource)

    def __str__(self) -> str:
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"


SCHEME_GROUP_VERSION = GroupVersion(group=GROUP_NAME, version=VERSION)


def resource(resource: str) -> GroupResource:
    """Return ``resource`` qualified with this package's API group."""
    return SCHEME_GROUP_VERSION.with_resource(resource).group_resource()


@dataclass
class ObjectMeta:
    """Metadata common to every stored object."""

    name: str = ""
    namespace: str = ""
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] = field(default_factory=dict)
    resource_version: str = ""
    creation_timestamp: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, omitting empty fields."""
        data: dict[str, Any] = {}
        if self.name:
            data["name"] = self.name
        if self.namespace:
            data["namespace"] = self.namespace
        if self.labels:
            data["labels"] = dict(self.labels)
        if self.annotations:
            data["annotations"] = dict(self.annotations)
        if self.resource_version:
            data["resourceVersion"] = self.resource_version
        if self.creation_timestamp:
            data["creationTimestamp"] = self.creation_timestamp
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ObjectMeta":
        """Build from the wire form; missing fields take their defaults."""
        data = data or {}
        return cls(
            name=data.get("name", "") or "",
            namespace=data.get("namespace", "") or "",
            labels=dict(data.get("labels") or {}),
            annotations=dict(data.get("annotations") or {}),
            resource_version=data.get("resourceVersion", "") or "",
            creation_timestamp=data.get("creationTimestamp", "") or "",
        )


@dataclass
class Config:
    """Operator settings."""

    s2i_run_job_template: str