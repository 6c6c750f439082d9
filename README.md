# s2ioperator

A Python library for describing and checking source-to-image (S2I) build
resources: builder templates, builders and build runs in the
`devops.kubesphere.io/v1alpha1` API group. It has no dependencies beyond
the standard library.

## Modules

- `s2ioperator.meta` – API group constants, `GroupVersion`,
  `GroupVersionResource`, `GroupResource`, the `resource()` helper,
  `ObjectMeta` (name, namespace, labels, annotations, resource version,
  creation time) and the operator `Config` (path of the run job template).
- `s2ioperator.policies` – enumerations `PullPolicy` (with `parse` and
  `display`), `RunState`, `TriggerSource` and `CodeFramework`; annotation and
  workload-kind constants; `new_docker_network_mode_container` and
  `is_valid_docker_network_mode`.
- `s2ioperator.template_types` – `Parameter` (with `to_environment`),
  `EnvironmentSpec`, `VolumeSpec`, `ContainerInfo`, `S2iBuilderTemplateSpec`
  and `S2iBuilderTemplate`.
- `s2ioperator.builder_types` – `S2iConfig` and its parts (`AuthConfig`,
  `DockerConfig`, `CGroupLimits`, `ProxyConfig`), `UserDefineTemplate`,
  `S2iBuilderSpec`, `S2iBuilderStatus`, `S2iBuilder`, `S2iAutoScale` and
  `DockerConfigJson` / `DockerConfigEntry`.
- `s2ioperator.run_types` – `S2iRunSpec`, `S2iRunStatus`, `S2iBuildResult`,
  `S2iBuildSource` and `S2iRun`.
- `s2ioperator.reference` – `parse_reference`, which splits a Docker image
  reference (`[domain/]path[:tag][@digest]`) into a `Reference`, raising
  `ReferenceError` (a `ValueError`) when it is malformed.
- `s2ioperator.validation` – `default_builder`, `validate_config`,
  `validate_parameters`, `validate_autoscale`, `validate_docker_reference`,
  `validate_builder`, `validate_template` and `validate_run`. Rejections are
  raised as `ValidationError` subclasses: `FieldRequiredError`,
  `FieldInvalidError` and `AggregateValidationError` (which holds every error
  found in `errors`).
- `s2ioperator.store` – `ObjectStore`, a thread-safe in-memory store with
  `create`, `get`, `update`, `update_status`, `delete`, `delete_collection`
  and `list` (filtered by namespace and an equality label selector). It hands
  out copies only and raises `NotFoundError` or `AlreadyExistsError`, both
  `StoreError` subclasses.
- `s2ioperator.listers` – read-only `S2iBuilderLister`,
  `S2iBuilderTemplateLister`, `S2iRunLister` and per-namespace
  `NamespaceLister` over a store, and `lister_for_resource`, which picks a
  lister for a `GroupVersionResource` or raises `LookupError`.

The resource classes convert to and from their JSON form with `to_dict` and
`from_dict`; empty optional fields are left out of the output.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from s2ioperator.builder_types import S2iBuilder
from s2ioperator.store import ObjectStore
from s2ioperator.validation import default_builder, validate_builder, ValidationError

store = ObjectStore()

builder = S2iBuilder.from_dict({
    "metadata": {"name": "demo", "namespace": "default"},
    "spec": {
        "config": {
            "imageName": "registry.example.com/demo/app",
            "sourceUrl": "https://git.example.com/demo/app.git",
            "builderImage": "example/java-builder:latest",
            "builderPullPolicy": "if-not-present",
        }
    },
})

default_builder(builder)          # fills in revisionId "master" and tag "latest"
try:
    validate_builder(builder, store)
except ValidationError as err:
    print("rejected:", err)
else:
    store.create(builder)
```

Listing what the store holds:

```python
from s2ioperator.listers import S2iBuilderLister

lister = S2iBuilderLister(store)
for item in lister.namespaced("default").list({}):
    print(item.metadata.name)
```

## What it does not do

This is a library only. It has no command-line program, does not connect to
a cluster or serve admission requests over HTTP, does not run builds or
create jobs, and does not collect metrics. Objects live only in the
in-memory `ObjectStore` for as long as the process runs.