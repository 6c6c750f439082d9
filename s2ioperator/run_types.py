"""Build run resources: run spec, build result, build source and status."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .builder_types import _decode_fields, _encode_fields, _field
from .meta import RESOURCE_KIND_S2I_RUN, SCHEME_GROUP_VERSION, ObjectMeta
from .policies import RunState


def _decode_run_state(value: Any) -> RunState | str:
    try:
        return RunState(value)
    except ValueError:
        return str(value)


@dataclass
class S2iRunSpec:
    """Desired state of a build run."""

    builder_name: str = _field("builderName", "", omitempty=False)
    backoff_limit: int = _field("backoffLimit", 0)
    seconds_after_finished: int = _field("secondsAfterFinished", 0)
    new_tag: str = _field("newTag", "")
    new_revision_id: str = _field("newRevisionId", "")
    new_source_url: str = _field("newSourceURL", "")

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iRunSpec":
        return _decode_fields(cls, data)


@dataclass
class S2iBuildResult:
    """What a finished build produced."""

    image_name: str = _field("imageName", "")
    image_size: int = _field("imageSize", 0)
    image_id: str = _field("imageID", "")
    image_created: str = _field("imageCreated", "")
    image_repo_tags: list[str] = _field("imageRepoTags", factory=list)
    command_pull: str = _field("commandPull", "")

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iBuildResult":
        return _decode_fields(cls, data)


@dataclass
class S2iBuildSource:
    """Where the sources of a build came from."""

    source_url: str = _field("sourceUrl", "")
    revision_id: str = _field("revisionId", "")
    binary_name: str = _field("binaryName", "")
    binary_size: int = _field("binarySize", 0)
    builder_image: str = _field("builderImage", "")
    description: str = _field("description", "")
    commit_id: str = _field("commitID", "")
    committer_name: str = _field("committerName", "")
    committer_email: str = _field("committerEmail", "")

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iBuildSource":
        return _decode_fields(cls, data)


@dataclass
class S2iRunStatus:
    """Observed state of a build run."""

    start_time: str | None = _field("startTime", None, nullable=True)
    completion_time: str | None = _field("completionTime", None, nullable=True)
    run_state: RunState | str = _field("runState", "", decode=_decode_run_state)
    log_url: str = _field("logURL", "")
    kubernetes_job_name: str = _field("kubernetesJobName", "")
    s2i_build_result: S2iBuildResult | None = _field(
        "s2iBuildResult", None, decode=S2iBuildResult.from_dict
    )
    s2i_build_source: S2iBuildSource | None = _field(
        "s2iBuildSource", None, decode=S2iBuildSource.from_dict
    )

    def to_dict(self) -> dict[str, Any]:
        return _encode_fields(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iRunStatus":
        return _decode_fields(cls, data)


@dataclass
class S2iRun:
    """A namespaced request to run one build of a builder."""

    metadata: ObjectMeta = field(default_factory=ObjectMeta)
    spec: S2iRunSpec = field(default_factory=S2iRunSpec)
    status: S2iRunStatus = field(default_factory=S2iRunStatus)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the wire form."""
        return {
            "apiVersion": str(SCHEME_GROUP_VERSION),
            "kind": RESOURCE_KIND_S2I_RUN,
            "metadata": self.metadata.to_dict(),
            "spec": self.spec.to_dict(),
            "status": self.status.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> "S2iRun":
        """Build from the wire form."""
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise TypeError(f"expected a mapping, got {type(data).__name__}")
        return cls(
            metadata=ObjectMeta.from_dict(data.get("metadata")),
            spec=S2iRunSpec.from_dict(data.get("spec")),
            status=S2iRunStatus.from_dict(data.get("status")),
        )


@dataclass
class S2iRunList:
    """A list of build runs."""

    items: list[S2iRun] = field(default_factory=list)