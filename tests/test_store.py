import pytest

from s2ioperator.builder_types import S2iBuilder, S2iBuilderStatus
from s2ioperator.meta import ObjectMeta
from s2ioperator.run_types import S2iRun, S2iRunStatus
from s2ioperator.store import (
    AlreadyExistsError,
    NotFoundError,
    ObjectStore,
    StoreError,
)
from s2ioperator.template_types import S2iBuilderTemplate


@pytest.fixture
def store():
    return ObjectStore()


def _storage_roundtrip(store, created, kind, namespace):
    store.create(created)
    fetched = store.get(kind, "foo", namespace)
    assert fetched == created

    updated = fetched
    updated.metadata.labels = {"hello": "world"}
    store.update(updated)
    fetched = store.get(kind, "foo", namespace)
    assert fetched == updated
    assert fetched.metadata.labels == {"hello": "world"}

    store.delete(kind, fetched.metadata.name, namespace)
    with pytest.raises(NotFoundError):
        store.get(kind, "foo", namespace)


def test_storage_s2i_builder(store):
    created = S2iBuilder(metadata=ObjectMeta(name="foo", namespace="default"))
    _storage_roundtrip(store, created, S2iBuilder, "default")


def test_storage_s2i_builder_template(store):
    created = S2iBuilderTemplate(metadata=ObjectMeta(name="foo"))
    _storage_roundtrip(store, created, S2iBuilderTemplate, "")


def test_storage_s2i_run(store):
    created = S2iRun(metadata=ObjectMeta(name="foo", namespace="default"))
    _storage_roundtrip(store, created, S2iRun, "default")


def test_create_twice_raises(store):
    store.create(S2iRun(metadata=ObjectMeta(name="foo", namespace="default")))
    with pytest.raises(AlreadyExistsError):
        store.create(S2iRun(metadata=ObjectMeta(name="foo", namespace="default")))


def test_not_found_message(store):
    with pytest.raises(NotFoundError) as info:
        store.get("S2iBuilder", "missing", "default")
    assert str(info.value) == 's2ibuilders.devops.kubesphere.io "missing" not found'


def test_update_missing_raises(store):
    with pytest.raises(NotFoundError):
        store.update(S2iBuilder(metadata=ObjectMeta(name="x", namespace="default")))


def test_namespaced_kind_requires_namespace(store):
    with pytest.raises(StoreError):
        store.create(S2iBuilder(metadata=ObjectMeta(name="x")))


def test_unknown_kind_raises(store):
    with pytest.raises(StoreError):
        store.list("Pod")


def test_returned_objects_are_copies(store):
    store.create(S2iRun(metadata=ObjectMeta(name="r", namespace="ns")))
    fetched = store.get(S2iRun, "r", "ns")
    fetched.metadata.labels["x"] = "y"
    assert store.get(S2iRun, "r", "ns").metadata.labels == {}


def test_update_status_only_changes_status(store):
    store.create(S2iBuilder(metadata=ObjectMeta(name="b", namespace="ns")))
    changed = S2iBuilder(
        metadata=ObjectMeta(name="b", namespace="ns", labels={"a": "b"}),
        status=S2iBuilderStatus(run_count=3),
    )
    result = store.update_status(changed)
    assert result.status.run_count == 3
    assert result.metadata.labels == {}
    assert store.get(S2iBuilder, "b", "ns").status.run_count == 3


def test_update_status_run_state(store):
    store.create(S2iRun(metadata=ObjectMeta(name="r", namespace="ns")))
    run = store.get(S2iRun, "r", "ns")
    run.status = S2iRunStatus(run_state="Running")
    store.update_status(run)
    assert store.get(S2iRun, "r", "ns").status.run_state == "Running"


def test_list_with_namespace_and_selector(store):
    store.create(S2iRun(metadata=ObjectMeta(name="b", namespace="one", labels={"app": "x"})))
    store.create(S2iRun(metadata=ObjectMeta(name="a", namespace="one", labels={"app": "y"})))
    store.create(S2iRun(metadata=ObjectMeta(name="c", namespace="two", labels={"app": "x"})))
    assert [r.metadata.name for r in store.list(S2iRun)] == ["a", "b", "c"]
    assert [r.metadata.name for r in store.list(S2iRun, "one")] == ["a", "b"]
    assert [r.metadata.name for r in store.list(S2iRun, None, {"app": "x"})] == ["b", "c"]
    assert store.list(S2iBuilder) == []


def test_delete_collection(store):
    store.create(S2iRun(metadata=ObjectMeta(name="a", namespace="one")))
    store.create(S2iRun(metadata=ObjectMeta(name="b", namespace="two")))
    assert store.delete_collection(S2iRun, "one") == 1
    assert [r.metadata.name for r in store.list(S2iRun)] == ["b"]
    assert store.delete_collection("s2iruns") == 1
    assert store.list(S2iRun) == []


def test_template_is_cluster_scoped(store):
    store.create(S2iBuilderTemplate(metadata=ObjectMeta(name="t", namespace="ignored")))
    fetched = store.get(S2iBuilderTemplate, "t", "anything")
    assert fetched.metadata.namespace == ""


def test_delete_missing_raises(store):
    with pytest.raises(NotFoundError):
        store.delete(S2iBuilderTemplate, "nope")