import pytest

from s2ioperator.builder_types import (
    AuthConfig,
    S2iBuilder,
    S2iBuilderSpec,
    S2iConfig,
    UserDefineTemplate,
)
from s2ioperator.meta import ObjectMeta
from s2ioperator.policies import AUTO_SCALE_ANNOTATIONS, RunState
from s2ioperator.reference import ReferenceError
from s2ioperator.run_types import S2iRun, S2iRunSpec
from s2ioperator.store import ObjectStore
from s2ioperator.template_types import (
    ContainerInfo,
    Parameter,
    S2iBuilderTemplate,
    S2iBuilderTemplateSpec,
)
from s2ioperator.validation import (
    AggregateValidationError,
    FieldInvalidError,
    FieldRequiredError,
    ValidationError,
    default_builder,
    validate_autoscale,
    validate_builder,
    validate_config,
    validate_docker_reference,
    validate_parameters,
    validate_run,
    validate_template,
)

IMAGE = "kubesphere/java-8-centos7:v2.1.0"
OTHER_IMAGE = "kubesphere/java-11-centos7:v2.1.0"


def make_config(**overrides):
    values = dict(
        source_url="https://example.com/app.git",
        builder_image=IMAGE,
        builder_pull_policy="if-not-present",
        image_name="example/app",
    )
    values.update(overrides)
    return S2iConfig(**values)


def make_builder(config=None, from_template=None, annotations=None, name="b"):
    return S2iBuilder(
        metadata=ObjectMeta(name=name, namespace="default", annotations=annotations or {}),
        spec=S2iBuilderSpec(config=config or make_config(), from_template=from_template),
    )


def make_template(name="java", images=(IMAGE, OTHER_IMAGE), default=IMAGE, parameters=()):
    return S2iBuilderTemplate(
        metadata=ObjectMeta(name=name),
        spec=S2iBuilderTemplateSpec(
            default_base_image=default,
            container_info=[ContainerInfo(builder_image=i) for i in images],
            parameters=list(parameters),
        ),
    )


def fields_of(errors):
    return [e.field for e in errors]


def test_default_builder_fills_revision_and_tag():
    builder = default_builder(make_builder())
    assert builder.spec.config.revision_id == "master"
    assert builder.spec.config.tag == "latest"


def test_default_builder_keeps_given_values():
    builder = make_builder(config=make_config(revision_id="dev", tag="v1"))
    default_builder(builder)
    assert (builder.spec.config.revision_id, builder.spec.config.tag) == ("dev", "v1")


def test_default_builder_requires_config():
    builder = S2iBuilder(metadata=ObjectMeta(name="b", namespace="default"))
    with pytest.raises(FieldRequiredError):
        default_builder(builder)


def test_validate_config_accepts_complete_config():
    assert validate_config(make_config(), False) == []


def test_validate_config_empty_config_errors_in_order():
    errors = validate_config(S2iConfig(), False)
    assert fields_of(errors) == ["sourceUrl", "builderImage", "builderPullPolicy"]
    assert isinstance(errors[0], FieldRequiredError)
    assert isinstance(errors[2], FieldInvalidError)


def test_validate_config_binary_url_needs_no_source():
    config = make_config(source_url="", is_binary_url=True)
    assert validate_config(config, False) == []
    assert fields_of(validate_config(make_config(source_url=""), False)) == ["sourceUrl"]


def test_validate_config_template_needs_no_builder_image():
    config = make_config(builder_image="")
    assert validate_config(config, True) == []
    assert fields_of(validate_config(config, False)) == ["builderImage"]


@pytest.mark.parametrize("policy", ["always", "never", "if-not-present"])
def test_validate_config_accepts_known_pull_policies(policy):
    assert validate_config(make_config(builder_pull_policy=policy), False) == []


def test_validate_config_rejects_unknown_pull_policy():
    errors = validate_config(make_config(builder_pull_policy="sometimes"), False)
    assert fields_of(errors) == ["builderPullPolicy"]


def test_validate_config_network_mode():
    assert validate_config(make_config(docker_network_mode="container:abc"), False) == []
    assert validate_config(make_config(docker_network_mode="netns:/proc/1/ns/net"), False) == []
    errors = validate_config(make_config(docker_network_mode="bogus"), False)
    assert fields_of(errors) == ["dockerNetworkMode"]


def test_validate_config_rejects_empty_label_key():
    errors = validate_config(make_config(labels={"": "x", "app": "y"}), False)
    assert fields_of(errors) == ["labels"]


def test_validate_config_rejects_malformed_builder_image():
    errors = validate_config(make_config(builder_image="Upper/Case"), False)
    assert fields_of(errors) == ["builderImage"]
    assert errors[0].reason


def test_validate_config_auth_without_credentials():
    config = make_config(
        runtime_authentication=AuthConfig(),
        incremental_authentication=AuthConfig(),
        pull_authentication=AuthConfig(username="user"),
        push_authentication=AuthConfig(secret_ref="regcred"),
    )
    errors = validate_config(config, False)
    assert fields_of(errors) == [
        "RuntimeAuthentication username|password / secretRef",
        "IncrementalAuthentication username|password / secretRef",
    ]


def test_validate_parameters():
    template = [
        Parameter(key="A", required=True),
        Parameter(key="B", required=True),
        Parameter(key="C", required=True),
        Parameter(key="D"),
    ]
    user = [Parameter(key="A", value="1"), Parameter(key="B", value="")]
    errors = validate_parameters(user, template)
    assert fields_of(errors) == ["Parameter:B", "Parameter:C"]


def test_validate_autoscale_supported_kinds():
    scales = validate_autoscale('[{"kind": "Deployment", "name": "web"}]')
    assert [(s.kind, s.name) for s in scales] == [("Deployment", "web")]
    assert validate_autoscale('[{"kind": "StatefulSet", "name": "db"}]')[0].kind == "StatefulSet"
    assert validate_autoscale("[]") == []


def test_validate_autoscale_unsupported_kind():
    with pytest.raises(ValueError, match=r"unsupport workload type \[DaemonSet\], name \[web\]"):
        validate_autoscale('[{"kind": "DaemonSet", "name": "web"}]')


@pytest.mark.parametrize("annotation", ["not json", '{"kind": "Deployment"}', "[1]"])
def test_validate_autoscale_malformed(annotation):
    with pytest.raises(ValueError):
        validate_autoscale(annotation)


def test_validate_docker_reference():
    ref = validate_docker_reference(IMAGE)
    assert ref.tag == "v2.1.0"
    with pytest.raises(ReferenceError):
        validate_docker_reference("bad image!")


def test_validate_builder_config_errors_are_aggregated():
    store = ObjectStore()
    builder = make_builder(config=make_config(source_url="", builder_pull_policy="x"))
    with pytest.raises(AggregateValidationError) as info:
        validate_builder(builder, store)
    assert fields_of(info.value.errors) == ["sourceUrl", "builderPullPolicy"]
    assert validate_builder(make_builder(), store) is None


def test_validate_builder_missing_template():
    store = ObjectStore()
    builder = make_builder(from_template=UserDefineTemplate(name="nope"))
    with pytest.raises(ValidationError) as info:
        validate_builder(builder, store)
    assert str(info.value) == (
        "Template not found, pls check the template name  [nope] or create a template"
    )


def test_validate_builder_required_template_parameter():
    store = ObjectStore()
    store.create(make_template(parameters=[Parameter(key="JAVA_OPTS", required=True)]))
    builder = make_builder(from_template=UserDefineTemplate(name="java"))
    with pytest.raises(AggregateValidationError) as info:
        validate_builder(builder, store)
    assert fields_of(info.value.errors) == ["Parameter:JAVA_OPTS"]


def test_validate_builder_template_image_must_be_offered():
    store = ObjectStore()
    store.create(make_template())
    config = make_config(builder_image="")
    chosen = make_builder(
        config=config, from_template=UserDefineTemplate(name="java", builder_image=OTHER_IMAGE)
    )
    assert validate_builder(chosen, store) is None
    stray = make_builder(
        config=config, from_template=UserDefineTemplate(name="java", builder_image="other/img")
    )
    with pytest.raises(ValidationError) as info:
        validate_builder(stray, store)
    assert str(info.value) == (
        f"builder's baseImage [other/img] not in builder baseImages [{IMAGE} {OTHER_IMAGE}]"
    )


def test_validate_builder_bad_autoscale_annotation():
    store = ObjectStore()
    builder = make_builder(
        annotations={AUTO_SCALE_ANNOTATIONS: '[{"kind": "Job", "name": "x"}]'}
    )
    with pytest.raises(FieldInvalidError) as info:
        validate_builder(builder, store)
    assert info.value.field == AUTO_SCALE_ANNOTATIONS
    assert "unsupport workload type [Job]" in info.value.reason


def test_validate_template_requires_images():
    template = make_template(images=())
    with pytest.raises(FieldRequiredError) as info:
        validate_template(template)
    assert info.value.field == "baseImages"


def test_validate_template_requires_default():
    with pytest.raises(FieldRequiredError) as info:
        validate_template(make_template(default=""))
    assert info.value.field == "defaultBaseImage"


def test_validate_template_default_must_be_listed():
    with pytest.raises(FieldInvalidError) as info:
        validate_template(make_template(images=(IMAGE,), default=OTHER_IMAGE))
    assert info.value.field == "defaultBaseImage"
    assert info.value.reason == f"defaultBaseImage [{OTHER_IMAGE}] should in [{IMAGE}]"


def test_validate_template_rejects_malformed_image():
    with pytest.raises(FieldInvalidError) as info:
        validate_template(make_template(images=(IMAGE, "Bad Image")))
    assert info.value.field == "builderImage"
    assert validate_template(make_template()) is None


def make_run(**spec):
    spec.setdefault("builder_name", "b")
    return S2iRun(
        metadata=ObjectMeta(name="r", namespace="default"), spec=S2iRunSpec(**spec)
    )


def test_validate_run_new_source_url_only_for_binary_builders():
    store = ObjectStore()
    store.create(make_builder(name="b"))
    store.create(make_builder(name="bin", config=make_config(is_binary_url=True)))
    with pytest.raises(FieldInvalidError) as info:
        validate_run(make_run(new_source_url="https://example.com/app.jar"), store)
    assert info.value.field == "newSourceURL"
    assert info.value.reason == "only b2i could set newSourceURL"
    run = make_run(builder_name="bin", new_source_url="https://example.com/app.jar")
    assert validate_run(run, store) is None


def test_validate_run_started_spec_cannot_change():
    store = ObjectStore()
    store.create(make_run())
    assert validate_run(make_run(new_tag="v2"), store) is None
    started = store.get(S2iRun, "r", "default")
    started.status.run_state = RunState.RUNNING
    store.update_status(started)
    assert validate_run(make_run(), store) is None
    with pytest.raises(FieldInvalidError) as info:
        validate_run(make_run(new_tag="v2"), store)
    assert info.value.field == "spec"
    assert info.value.reason == "should not change s2i run spec when job started"


def test_validate_run_checks_new_tag():
    store = ObjectStore()
    with pytest.raises(ReferenceError):
        validate_run(make_run(new_tag="bad tag"), store)
    assert validate_run(make_run(new_tag="v1.0"), store) is None


def test_validate_run_store_failure():
    store = ObjectStore()
    run = S2iRun(metadata=ObjectMeta(name="r"), spec=S2iRunSpec(builder_name="b"))
    with pytest.raises(FieldInvalidError) as info:
        validate_run(run, store)
    assert info.value.field == "no"
    assert info.value.reason == "could not call k8s api"


def test_aggregate_message():
    first, second = FieldRequiredError("a"), FieldRequiredError("b")
    assert str(AggregateValidationError([first])) == str(first)
    combined = AggregateValidationError([first, first, second])
    assert str(combined) == f"[{first}, {second}]"
    assert combined.errors == [first, first, second]