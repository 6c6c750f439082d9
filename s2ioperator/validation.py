"""Defaulting and admission checks for builders, builder templates and build runs."""

from __future__ import annotations

import json
import logging
from typing import Iterable, Sequence

from .builder_types import AuthConfig, S2iAutoScale, S2iBuilder, S2iConfig
from .policies import (
    AUTO_SCALE_ANNOTATIONS,
    KIND_DEPLOYMENT,
    KIND_STATEFUL_SET,
    PullPolicy,
    is_valid_docker_network_mode,
)
from .reference import Reference, parse_reference
from .run_types import S2iRun
from .store import NotFoundError, ObjectStore, StoreError
from .template_types import Parameter, S2iBuilderTemplate

DEFAULT_REVISION_ID = "master"
DEFAULT_TAG = "latest"

_log = logging.getLogger(__name__)

_VALID_PULL_POLICIES = frozenset(policy.value for policy in PullPolicy)
_SUPPORTED_WORKLOADS = (KIND_STATEFUL_SET, KIND_DEPLOYMENT)


class ValidationError(ValueError):
    """An object was rejected by validation."""


class FieldRequiredError(ValidationError):
    """A required field is missing."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"{field_name}: Required value")
        self.field = field_name


class FieldInvalidError(ValidationError):
    """A field holds a value that is not allowed."""

    def __init__(self, field_name: str, reason: str = "") -> None:
        message = f"{field_name}: Invalid value"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.field = field_name
        self.reason = reason


class AggregateValidationError(ValidationError):
    """Several validation errors reported together."""

    def __init__(self, errors: Iterable[Exception]) -> None:
        self.errors = list(errors)
        messages: list[str] = []
        for error in self.errors:
            text = str(error)
            if text not in messages:
                messages.append(text)
        if len(messages) == 1:
            message = messages[0]
        else:
            message = "[" + ", ".join(messages) + "]"
        super().__init__(message)


def _format_list(items: Sequence[str]) -> str:
    return "[" + " ".join(items) + "]"


def default_builder(builder: S2iBuilder) -> S2iBuilder:
    """Fill in the default revision and tag of a builder's config, in place."""
    _log.debug("default builder %s", builder.metadata.name)
    config = builder.spec.config
    if config is None:
        raise FieldRequiredError("config")
    if not config.revision_id:
        config.revision_id = DEFAULT_REVISION_ID
    if not config.tag:
        config.tag = DEFAULT_TAG
    return builder


def _missing_auth(auth: AuthConfig | None) -> bool:
    return auth is not None and auth.secret_ref is None and not auth.username and not auth.password


def validate_config(config: S2iConfig | None, from_template: bool) -> list[ValidationError]:
    """Every problem found in a build configuration, in a fixed order."""
    if config is None:
        return [FieldRequiredError("config")]
    errors: list[ValidationError] = []
    if not config.is_binary_url and not config.source_url:
        errors.append(FieldRequiredError("sourceUrl"))
    if not from_template and not config.builder_image:
        errors.append(FieldRequiredError("builderImage"))
    if config.builder_pull_policy not in _VALID_PULL_POLICIES:
        errors.append(FieldInvalidError("builderPullPolicy"))
    if config.docker_network_mode and not is_valid_docker_network_mode(
        config.docker_network_mode
    ):
        errors.append(FieldInvalidError("dockerNetworkMode"))
    errors.extend(FieldInvalidError("labels") for key in config.labels if not key)
    if config.builder_image:
        try:
            validate_docker_reference(config.builder_image)
        except ValueError as exc:
            errors.append(FieldInvalidError("builderImage", str(exc)))
    for label, auth in (
        ("RuntimeAuthentication", config.runtime_authentication),
        ("IncrementalAuthentication", config.incremental_authentication),
        ("PullAuthentication", config.pull_authentication),
        ("PushAuthentication", config.push_authentication),
    ):
        if _missing_auth(auth):
            errors.append(FieldRequiredError(f"{label} username|password / secretRef"))
    return errors


def validate_parameters(
    user: Sequence[Parameter], template: Sequence[Parameter]
) -> list[ValidationError]:
    """Errors for required template parameters the user left without a value."""
    errors: list[ValidationError] = []
    for wanted in template:
        given = next((p for p in user if p.key == wanted.key), None)
        if wanted.required and (given is None or not given.value):
            errors.append(FieldRequiredError("Parameter:" + wanted.key))
    return errors


def validate_autoscale(annotation: str) -> list[S2iAutoScale]:
    """Parse an autoscale annotation, raising ValueError if it is not acceptable.

    Only the first entry's workload kind is checked.
    """
    raw = json.loads(annotation)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError("autoscale annotation must be a JSON array")
    try:
        scales = [S2iAutoScale.from_dict(item) for item in raw]
    except TypeError as exc:
        raise ValueError(str(exc)) from exc
    if scales and scales[0].kind not in _SUPPORTED_WORKLOADS:
        first = scales[0]
        raise ValueError(f"unsupport workload type [{first.kind}], name [{first.name}]")
    return scales


def validate_docker_reference(ref: str) -> Reference:
    """Parse an image reference, raising ReferenceError if it is malformed."""
    return parse_reference(ref)


def validate_builder(builder: S2iBuilder, store: ObjectStore) -> None:
    """Check a builder on create or update, raising ValidationError if rejected."""
    _log.debug("validate builder %s", builder.metadata.name)
    spec = builder.spec
    from_template = False
    if spec.from_template is not None:
        name = spec.from_template.name
        try:
            template = store.get(S2iBuilderTemplate, name)
        except NotFoundError:
            raise ValidationError(
                f"Template not found, pls check the template name  [{name}] "
                "or create a template"
            ) from None
        errors = validate_parameters(spec.from_template.parameters, template.spec.parameters)
        if errors:
            raise AggregateValidationError(errors)
        base_images = template.spec.builder_images()
        chosen = spec.from_template.builder_image
        if chosen and chosen not in base_images:
            raise ValidationError(
                f"builder's baseImage [{chosen}] not in builder baseImages "
                f"{_format_list(base_images)}"
            )
        from_template = True
    annotation = builder.metadata.annotations.get(AUTO_SCALE_ANNOTATIONS)
    if annotation is not None:
        try:
            validate_autoscale(annotation)
        except ValueError as exc:
            raise FieldInvalidError(AUTO_SCALE_ANNOTATIONS, str(exc)) from exc
    errors = validate_config(spec.config, from_template)
    if errors:
        raise AggregateValidationError(errors)


def validate_template(template: S2iBuilderTemplate) -> None:
    """Check a builder template on create or update, raising ValidationError."""
    _log.debug("validate template %s", template.metadata.name)
    spec = template.spec
    if not spec.container_info:
        raise FieldRequiredError("baseImages")
    if not spec.default_base_image:
        raise FieldRequiredError("defaultBaseImage")
    builder_images = spec.builder_images()
    if spec.default_base_image not in builder_images:
        raise FieldInvalidError(
            "defaultBaseImage",
            f"defaultBaseImage [{spec.default_base_image}] should in "
            f"{_format_list(builder_images)}",
        )
    for image in builder_images:
        try:
            validate_docker_reference(image)
        except ValueError as exc:
            raise FieldInvalidError("builderImage", str(exc)) from exc
    try:
        validate_docker_reference(spec.default_base_image)
    except ValueError as exc:
        raise FieldInvalidError("defaultBaseImage", str(exc)) from exc


def validate_run(run: S2iRun, store: ObjectStore) -> None:
    """Check a build run on create or update.

    Raises ValidationError, or ReferenceError when the new tag is malformed.
    """
    _log.debug("validate run %s", run.metadata.name)
    namespace = run.metadata.namespace
    try:
        builder = store.get(S2iBuilder, run.spec.builder_name, namespace)
    except NotFoundError:
        builder = None
    except StoreError as exc:
        raise FieldInvalidError("no", "could not call k8s api") from exc
    if builder is not None and run.spec.new_source_url:
        config = builder.spec.config
        if config is None or not config.is_binary_url:
            raise FieldInvalidError("newSourceURL", "only b2i could set newSourceURL")

    try:
        origin = store.get(S2iRun, run.metadata.name, namespace)
    except StoreError:
        origin = None
    if origin is not None and origin.status.run_state and origin.spec != run.spec:
        raise FieldInvalidError("spec", "should not change s2i run spec when job started")

    if run.spec.new_tag:
        validate_docker_reference(f"validate:{run.spec.new_tag}")