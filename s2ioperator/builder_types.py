"""Builder resources: build configuration, builder spec, status and helpers."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Mapping

from .meta import RESOURCE_KIND_S2I_BUILDER, SCHEME_GROUP_VERSION, ObjectMeta
from .template_types import EnvironmentSpec, Parameter, VolumeSpec


def _field(
    key: str,
    default: Any = None,
    *,
    factory: Callable[[], Any] | None = None,
    omitempty: bool = True,
    nullable: bool = False,
    decode: Callable[[Any], Any] | None = None,
    encode: Callable[[Any], Any] | None = None,
) -> Any:
    metadata = {
        "json": key,
        "omitempty": omitempty,
        "nullable": nullable,
        "decode": decode,
        "encode": encode,
    }
    if factory is not None:
        return field(default_factory=factory, metadata=metadata)
    return field(default=default, metadata=metadata)


def _is_empty(value: Any, nullable: bool) -> bool:
    if value is None:
        return True
    if nullable:
        return False
    if isinstance(value, (str, list, dict, tuple)):
        return len(value) == 0
    if isinstance(value, (bool, int, float)):
        return not value
    return False


def _encode(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, list):
        return [_encode(v) for v in value]
    if isinstance(value, dict):
        return {k: _encode(v) for k, v in value.items()}
    return value


def _encode_fields(obj: Any) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        meta = f.metadata
        if meta["omitempty"] and _is_empty(value, meta["nullable"]):
            continue
        encode = meta["encode"]
        data[meta["json"]] = encode(value) if encode is not None and value is not None else _encode(value)
    return data


def _decode_fields(cls: type, data: Mapping[str, Any] | None) -> Any:
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise TypeError(f"expected a mapping, got {type(data).__name__}")
    kwargs: dict[str, Any] = {}
    for f in fields(cls):
        raw = data.get(f.metadata["json"])
        if raw is None:
            continue
        decode = f.metadata["decode"]
        if decode is not None:
            kwargs[f.name] = decode(raw)
        elif isinstance(raw, list):
            kwargs[f.name] = list(raw)
        elif isinstance(raw, dict):
            kwargs[f.name] = dict(raw)
        else:
            kwargs[f.name] = raw
    return cls(**kwargs)


def _list_of(cls: Any) -> Callable[[Any], list[Any]]:
    return lambda items: [cls.from_dict(item) for item in items]


def _encode_secret_ref(name: str) -> dict[str, str]:
    return {"name": name}


def _decode_secret_ref(data: Mapping[str, Any]) -> str:
    return (data or {}).get("name") or ""


@dataclass
class ProxyConfig:
    """HTTP and HTTPS proxy settings."""

    http_proxy: str = _field("httpProxy", "")
    https_proxy: str = _field("httpsProxy", "")

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "ProxyConfig":
        return _decode_fields(cls, data)


@dataclass
class CGroupLimits:
    """Limits that constrain container resources."""

    memory_limit_bytes: int = _field("memoryLimitBytes", 0, omitempty=False)
    cpu_shares: int = _field("cpuShares", 0, omitempty=False)
    cpu_period: int = _field("cpuPeriod", 0, omitempty=False)
    cpu_quota: int = _field("cpuQuota", 0, omitempty=False)
    memory_swap: int = _field("memorySwap", 0, omitempty=False)
    parent: str = _field("parent", "", omitempty=False)

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "CGroupLimits":
        return _decode_fields(cls, data)


@dataclass
class DockerConfig:
    """How to reach a Docker daemon."""

    endpoint: str = _field("endPoint", "", omitempty=False)
    cert_file: str = _field("certFile", "", omitempty=False)
    key_file: str = _field("keyFile", "", omitempty=False)
    ca_file: str = _field("caFile", "", omitempty=False)
    use_tls: bool = _field("useTLS", False, omitempty=False)
    tls_verify: bool = _field("tlsVerify", False, omitempty=False)

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "DockerConfig":
        return _decode_fields(cls, data)


@dataclass
class AuthConfig:
    """Registry credentials, given inline or through a named secret."""

    username: str = _field("username", "")
    password: str = _field("password", "")
    email: str = _field("email", "")
    server_address: str = _field("serverAddress", "")
    secret_ref: str | None = _field(
        "secretRef",
        None,
        nullable=True,
        encode=_encode_secret_ref,
        decode=_decode_secret_ref,
    )

    def has_credentials(self) -> bool:
        """Whether a secret reference, a username or a password is given."""
        return self.secret_ref is not None or bool(self.username) or bool(self.password)

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "AuthConfig":
        return _decode_fields(cls, data)


def _auth() -> Any:
    return _field("", None, decode=AuthConfig.from_dict)


@dataclass
class S2iConfig:
    """Everything a source-to-image build needs."""

    display_name: str = _field("displayName", "")
    description: str = _field("description", "")
    builder_image: str = _field("builderImage", "")
    builder_image_version: str = _field("builderImageVersion", "")
    builder_base_image_version: str = _field("builderBaseImageVersion", "")
    runtime_image: str = _field("runtimeImage", "")
    output_image_name: str = _field("outputImageName", "")
    runtime_image_pull_policy: str = _field("runtimeImagePullPolicy", "")
    runtime_authentication: AuthConfig | None = _field(
        "runtimeAuthentication", None, decode=AuthConfig.from_dict
    )
    runtime_artifacts: list[VolumeSpec] = _field(
        "runtimeArtifacts", factory=list, decode=_list_of(VolumeSpec)
    )
    docker_config: DockerConfig | None = _field(
        "dockerConfig", None, decode=DockerConfig.from_dict
    )
    pull_authentication: AuthConfig | None = _field(
        "pullAuthentication", None, decode=AuthConfig.from_dict
    )
    push_authentication: AuthConfig | None = _field(
        "pushAuthentication", None, decode=AuthConfig.from_dict
    )
    incremental_authentication: AuthConfig | None = _field(
        "incrementalAuthentication", None, decode=AuthConfig.from_dict
    )
    docker_network_mode: str = _field("dockerNetworkMode", "")
    preserve_working_dir: bool = _field("preserveWorkingDir", False)
    image_name: str = _field("imageName", "", omitempty=False)
    tag: str = _field("tag", "")
    builder_pull_policy: str = _field("builderPullPolicy", "")
    previous_image_pull_policy: str = _field("previousImagePullPolicy", "")
    incremental: bool = _field("incremental", False)
    incremental_from_tag: str = _field("incrementalFromTag", "")
    remove_previous_image: bool = _field("removePreviousImage", False)
    environment: list[EnvironmentSpec] = _field(
        "environment", factory=list, decode=_list_of(EnvironmentSpec)
    )
    label_namespace: str = _field("labelNamespace", "")
    callback_url: str = _field("callbackUrl", "")
    scripts_url: str = _field("scriptsUrl", "")
    destination: str = _field("destination", "")
    working_dir: str = _field("workingDir", "")
    working_source_dir: str = _field("workingSourceDir", "")
    layered_build: bool = _field("layeredBuild", False)
    context_dir: str = _field("contextDir", "")
    assemble_user: str = _field("assembleUser", "")
    run_image: bool = _field("runImage", False)
    usage: bool = _field("usage", False)
    injections: list[VolumeSpec] = _field(
        "injections", factory=list, decode=_list_of(VolumeSpec)
    )
    cgroup_limits: CGroupLimits | None = _field(
        "cgroupLimits", None, decode=CGroupLimits.from_dict
    )
    drop_capabilities: list[str] = _field("dropCapabilities", factory=list)
    script_download_proxy_config: ProxyConfig | None = _field(
        "scriptDownloadProxyConfig", None, decode=ProxyConfig.from_dict
    )
    exclude_reg_exp: str = _field("excludeRegExp", "")
    block_on_build: bool = _field("blockOnBuild", False)
    has_on_build: bool = _field("hasOnBuild", False)
    build_volumes: list[str] = _field("buildVolumes", factory=list)
    labels: dict[str, str] = _field("labels", factory=dict)
    security_opt: list[str] = _field("securityOpt", factory=list)
    keep_symlinks: bool = _field("keepSymlinks", False)
    as_dockerfile: str = _field("asDockerfile", "")
    image_work_dir: str = _field("imageWorkDir", "")
    image_scripts_url: str = _field("imageScriptsUrl", "")
    add_host: list[str] = _field("addHost", factory=list)
    export: bool = _field("export", False)
    source_url: str = _field("sourceUrl", "", omitempty=False)
    is_binary_url: bool = _field("isBinaryURL", False)
    git_secret_ref: str | None = _field(
        "gitSecretRef",
        None,
        nullable=True,
        encode=_encode_secret_ref,
        decode=_decode_secret_ref,
    )
    revision_id: str = _field("revisionId", "")
    taint_key: str = _field("taintKey", "")
    node_affinity_key: str = _field("nodeAffinityKey", "")
    node_affinity_values: list[str] = _field("nodeAffinityValues", factory=list)
    output_build_result: bool = _field("outputBuildResult", False)
    branch_expression: str = _field("branchExpression", "")
    secret_code: str = _field("secretCode", "")

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form, omitting empty optional fields."""
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iConfig":
        """Build from the wire form."""
        return _decode_fields(cls, data)


@dataclass
class UserDefineTemplate:
    """A reference to a builder template with user-supplied parameters."""

    name: str = _field("name", "")
    parameters: list[Parameter] = _field(
        "parameters", factory=list, decode=_list_of(Parameter)
    )
    builder_image: str = _field("builderImage", "")

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "UserDefineTemplate":
        return _decode_fields(cls, data)


@dataclass
class S2iBuilderSpec:
    """Desired state of a builder."""

    config: S2iConfig | None = _field("config", None, decode=S2iConfig.from_dict)
    from_template: UserDefineTemplate | None = _field(
        "fromTemplate", None, decode=UserDefineTemplate.from_dict
    )

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iBuilderSpec":
        return _decode_fields(cls, data)


@dataclass
class S2iBuilderStatus:
    """Observed state of a builder."""

    run_count: int = _field("runCount", 0, omitempty=False)
    last_run_state: str = _field("lastRunState", "")
    last_run_name: str | None = _field("lastRunName", None, nullable=True)
    last_run_start_time: str | None = _field("lastRunStartTime", None, nullable=True)

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iBuilderStatus":
        return _decode_fields(cls, data)


@dataclass
class S2iBuilder:
    """A namespaced builder resource."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: S2iBuilderSpec = field(default_factory=S2iBuilderSpec)
    status: S2iBuilderStatus = field(default_factory=S2iBuilderStatus)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        return {
            "apiVersion": str(SCHEME_GROUP_VERSION),
            "kind": RESOURCE_KIND_S2I_BUILDER,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iBuilder":
        """Build from the wire form."""
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise TypeError(f"expected a mapping, got {type(data).__name__}")
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=S2iBuilderSpec.from_dict(data.get("spec")),
            status=S2iBuilderStatus.from_dict(data.get("status")),
        )


@dataclass
class S2iBuilderList:
    """A list of builders."""

    items: list[S2iBuilder] = field(default_factory=list)


@dataclass
class S2iAutoScale:
    """A workload to scale after a run completes."""

    kind: str = _field("kind", "", omitempty=False)
    name: str = _field("name", "", omitempty=False)
    init_replicas: int | None = _field("initReplicas", None, nullable=True)
    containers: list[str] = _field("containers", factory=list)

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iAutoScale":
        """Build from the wire form, raising TypeError on a malformed entry."""
        result = _decode_fields(cls, data)
        if not isinstance(result.kind, str) or not isinstance(result.name, str):
            raise TypeError("autoscale kind and name must be strings")
        if result.init_replicas is not None and (
            isinstance(result.init_replicas, bool) or not isinstance(result.init_replicas, int)
        ):
            raise TypeError("autoscale initReplicas must be an integer")
        return result


@dataclass
class DockerConfigEntry:
    """Credentials for one image registry."""

    username: str = _field("username", "", omitempty=False)
    password: str = _field("password", "", omitempty=False)
    email: str = _field("email", "", omitempty=False)
    server_address: str = _field("serverAddress", "")

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "DockerConfigEntry":
        return _decode_fields(cls, data)


@dataclass
class DockerConfigJson:
    """The Docker client configuration file: registry credentials by server."""

    auths: dict[str, DockerConfigEntry] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        return {"auths": {server: entry.to_dict() for server, entry in self.auths.items()}}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "DockerConfigJson":
        """Build from the wire form."""
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise TypeError(f"expected a mapping, got {type(data).__name__}")
        auths = data.get("auths") or {}
        return cls(
            auths={server: DockerConfigEntry.from_dict(e) for server, e in auths.items()}
        )