"""Builder template resources: parameters, container images and the template itself."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .meta import (
    RESOURCE_KIND_S2I_BUILDER_TEMPLATE,
    SCHEME_GROUP_VERSION,
    ObjectMeta,
)
from .policies import CodeFramework


def _mapping(data: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"expected a mapping, got {type(data).__name__}")
    return data


@dataclass
class EnvironmentSpec:
    """A single environment variable."""

    name: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form; both fields are always present."""
        return {"name": self.name, "value": self.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "EnvironmentSpec":
        """Build from the wire form."""
        data = _mapping(data)
        return cls(name=data.get("name") or "", value=data.get("value") or "")


@dataclass
class VolumeSpec:
    """A single volume mount point."""

    source: str = ""
    destination: str = ""
    keep: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, omitting empty fields."""
        data: dict[str, Any] = {}
        if self.source:
            data["source"] = self.source
        if self.destination:
            data["destination"] = self.destination
        if self.keep:
            data["keep"] = True
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "VolumeSpec":
        """Build from the wire form."""
        data = _mapping(data)
        return cls(
            source=data.get("source") or "",
            destination=data.get("destination") or "",
            keep=bool(data.get("keep", False)),
        )


@dataclass
class Parameter:
    """A template parameter that becomes an environment variable."""

    description: str = ""
    key: str = ""
    type: str = ""
    opt_values: list[str] = field(default_factory=list)
    required: bool = False
    default_value: str = ""
    value: str = ""

    def to_environment(self) -> EnvironmentSpec | None:
        """The environment variable for this parameter, or None if it has no value."""
        if self.value:
            return EnvironmentSpec(name=self.key, value=self.value)
        if self.default_value:
            return EnvironmentSpec(name=self.key, value=self.default_value)
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, omitting empty fields."""
        data: dict[str, Any] = {}
        if self.description:
            data["description"] = self.description
        if self.key:
            data["key"] = self.key
        if self.type:
            data["type"] = self.type
        if self.opt_values:
            data["optValues"] = list(self.opt_values)
        if self.required:
            data["required"] = True
        if self.default_value:
            data["defaultValue"] = self.default_value
        if self.value:
            data["value"] = self.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "Parameter":
        """Build from the wire form."""
        data = _mapping(data)
        return cls(
            description=data.get("description") or "",
            key=data.get("key") or "",
            type=data.get("type") or "",
            opt_values=list(data.get("optValues") or []),
            required=bool(data.get("required", False)),
            default_value=data.get("defaultValue") or "",
            value=data.get("value") or "",
        )


@dataclass
class ContainerInfo:
    """Images and volumes a template offers."""

    builder_image: str = ""
    runtime_image: str = ""
    runtime_artifacts: list[VolumeSpec] = field(default_factory=list)
    build_volumes: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, omitting empty fields."""
        data: dict[str, Any] = {}
        if self.builder_image:
            data["builderImage"] = self.builder_image
        if self.runtime_image:
            data["runtimeImage"] = self.runtime_image
        if self.runtime_artifacts:
            data["runtimeArtifacts"] = [v.to_dict() for v in self.runtime_artifacts]
        if self.build_volumes:
            data["buildVolumes"] = list(self.build_volumes)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ContainerInfo":
        """Build from the wire form."""
        data = _mapping(data)
        return cls(
            builder_image=data.get("builderImage") or "",
            runtime_image=data.get("runtimeImage") or "",
            runtime_artifacts=[
                VolumeSpec.from_dict(v) for v in data.get("runtimeArtifacts") or []
            ],
            build_volumes=list(data.get("buildVolumes") or []),
        )


def _decode_framework(value: str) -> CodeFramework | str:
    try:
        return CodeFramework(value)
    except ValueError:
        return value


@dataclass
class S2iBuilderTemplateSpec:
    """Desired state of a builder template."""

    default_base_image: str = ""
    container_info: list[ContainerInfo] = field(default_factory=list)
    code_framework: CodeFramework | str = ""
    parameters: list[Parameter] = field(default_factory=list)
    version: str = ""
    description: str = ""
    icon_path: str = ""

    def builder_images(self) -> list[str]:
        """Builder images offered by the template, in declaration order."""
        return [info.builder_image for info in self.container_info]

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, omitting empty fields."""
        data: dict[str, Any] = {}
        if self.default_base_image:
            data["defaultBaseImage"] = self.default_base_image
        if self.container_info:
            data["containerInfo"] = [c.to_dict() for c in self.container_info]
        if self.code_framework:
            framework = self.code_framework
            data["codeFramework"] = (
                framework.value if isinstance(framework, CodeFramework) else str(framework)
            )
        if self.parameters:
            data["environment"] = [p.to_dict() for p in self.parameters]
        if self.version:
            data["version"] = self.version
        if self.description:
            data["description"] = self.description
        if self.icon_path:
            data["iconPath"] = self.icon_path
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iBuilderTemplateSpec":
        """Build from the wire form."""
        data = _mapping(data)
        framework = data.get("codeFramework") or ""
        return cls(
            default_base_image=data.get("defaultBaseImage") or "",
            container_info=[
                ContainerInfo.from_dict(c) for c in data.get("containerInfo") or []
            ],
            code_framework=_decode_framework(framework) if framework else "",
            parameters=[Parameter.from_dict(p) for p in data.get("environment") or []],
            version=data.get("version") or "",
            description=data.get("description") or "",
            icon_path=data.get("iconPath") or "",
        )


@dataclass
class S2iBuilderTemplate:
    """A cluster-scoped template that builders can be created from."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: S2iBuilderTemplateSpec = field(default_factory=S2iBuilderTemplateSpec)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        return {
            "apiVersion": str(SCHEME_GROUP_VERSION),
            "kind": RESOURCE_KIND_S2I_BUILDER_TEMPLATE,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": {},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iBuilderTemplate":
        """Build from the wire form."""
        data = _mapping(data)
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=S2iBuilderTemplateSpec.from_dict(data.get("spec")),
        )


@dataclass
class S2iBuilderTemplateList:
    """A list of builder templates."""

    items: list[S2iBuilderTemplate] = field(default_factory=list)