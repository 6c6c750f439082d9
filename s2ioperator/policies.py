"""Enumerations and small policies shared by the API types."""

from __future__ import annotations

import json
from enum import Enum


class PullPolicy(str, Enum):
    """When an image should be pulled."""

    ALWAYS = "always"
    NEVER = "never"
    IF_NOT_PRESENT = "if-not-present"

    @classmethod
    def parse(cls, value: str) -> "PullPolicy":
        """Parse a policy name, raising ValueError for unknown names."""
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"invalid value {json.dumps(str(value))}, "
                "valid values are: always, never or if-not-present"
            ) from None

    @classmethod
    def display(cls, value: "str | PullPolicy | None") -> str:
        """Text shown for a policy; an unset policy shows the default."""
        if not value:
            return DEFAULT_BUILDER_PULL_POLICY.value
        return value.value if isinstance(value, PullPolicy) else str(value)

    def __str__(self) -> str:
        return self.value


DEFAULT_BUILDER_PULL_POLICY = PullPolicy.IF_NOT_PRESENT
DEFAULT_RUNTIME_IMAGE_PULL_POLICY = PullPolicy.IF_NOT_PRESENT
DEFAULT_PREVIOUS_IMAGE_PULL_POLICY = PullPolicy.IF_NOT_PRESENT


class RunState(str, Enum):
    """State of a build run."""

    NOT_RUNNING = "Not Running Yet"
    RUNNING = "Running"
    SUCCESSFUL = "Successful"
    FAILED = "Failed"
    UNKNOWN = "Unknown"


class TriggerSource(str, Enum):
    """What started a build run."""

    DEFAULT = "Manual"
    GITHUB = "Github"
    GITLAB = "Gitlab"
    SVN = "SVN"
    OTHERS = "Others"


class CodeFramework(str, Enum):
    """Language or framework a builder template targets."""

    RUBY = "ruby"
    GO = "go"
    JAVA = "Java"
    JAVA_TOMCAT = "JavaTomcat"
    NODEJS = "Nodejs"
    PYTHON = "python"


AUTO_SCALE_ANNOTATIONS = "devops.kubesphere.io/autoscale"
S2I_RUN_LABEL = "devops.kubesphere.io/s2ir"
S2IR_COMPLETED_SCALE_ANNOTATIONS = "devops.kubesphere.io/completedscale"
WORKLOAD_COMPLETED_INIT_ANNOTATIONS = "devops.kubesphere.io/inithasbeencomplted"
S2I_RUN_DO_NOT_AUTO_SCALE_ANNOTATIONS = "devops.kubesphere.io/donotautoscale"
DESCRIPTION_ANNOTATIONS = "desc"

KIND_DEPLOYMENT = "Deployment"
KIND_STATEFUL_SET = "StatefulSet"

DOCKER_NETWORK_MODE_HOST = "host"
DOCKER_NETWORK_MODE_BRIDGE = "bridge"
DOCKER_NETWORK_MODE_CONTAINER_PREFIX = "container:"
DOCKER_NETWORK_MODE_NETWORK_NAMESPACE_PREFIX = "netns:"


def new_docker_network_mode_container(container_id: str) -> str:
    """Network mode placing a container in another container's namespace."""
    return DOCKER_NETWORK_MODE_CONTAINER_PREFIX + container_id


def is_valid_docker_network_mode(mode: str) -> bool:
    """Whether ``mode`` is bridge, host, container:<id> or netns:<path>."""
    if mode in (DOCKER_NETWORK_MODE_BRIDGE, DOCKER_NETWORK_MODE_HOST):
        return True
    return mode.startswith(
        (DOCKER_NETWORK_MODE_CONTAINER_PREFIX, DOCKER_NETWORK_MODE_NETWORK_NAMESPACE_PREFIX)
    )