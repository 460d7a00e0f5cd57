from common.rules_engine.extractor import extract_containers
from common.rules_engine.models import Resource, Resources, ResourceSpec, SecurityContext


def test_extracts_from_pod_template(make_deployment, make_container):
    res = make_deployment([make_container(name="a"), make_container(name="b", image="redis")])
    containers = extract_containers(res)
    assert [c.name for c in containers] == ["a", "b"]
    assert containers[1].image == "redis"


def test_extracts_from_bare_pod(make_pod, make_container):
    containers = extract_containers(make_pod([make_container(name="solo")]))
    assert [c.name for c in containers] == ["solo"]


def test_template_wins_even_when_empty():
    res = Resource.from_document(
        {
            "kind": "Deployment",
            "spec": {
                "template": {"spec": {"containers": []}},
                "containers": [{"name": "ignored", "image": "x"}],
            },
        }
    )
    assert extract_containers(res) == []


def test_template_key_without_containers_does_not_fall_back():
    res = Resource.from_document(
        {
            "kind": "Deployment",
            "spec": {"template": {"metadata": {}}, "containers": [{"name": "ignored"}]},
        }
    )
    assert extract_containers(res) == []


def test_missing_or_malformed_spec_yields_nothing():
    assert extract_containers(Resource.from_document({"kind": "ConfigMap", "data": {"a": "b"}})) == []
    assert extract_containers(Resource.from_document({"kind": "Pod", "spec": "nonsense"})) == []
    assert extract_containers(Resource.from_document({"kind": "Pod", "spec": {"containers": "x"}})) == []


def test_non_mapping_container_entries_are_skipped():
    res = Resource.from_document({"kind": "Pod", "spec": {"containers": ["bad", None, {"name": "ok"}]}})
    assert [c.name for c in extract_containers(res)] == ["ok"]


def test_missing_name_and_image_default_to_empty():
    res = Resource.from_document({"kind": "Pod", "spec": {"containers": [{"name": 42}]}})
    (container,) = extract_containers(res)
    assert container.name == ""
    assert container.image == ""
    assert container.resources is None
    assert container.security_context is None


def test_resources_absent_vs_empty_object(make_pod):
    (empty,) = extract_containers(make_pod([{"name": "c", "resources": {}}]))
    assert empty.resources == Resources()
    (partial,) = extract_containers(make_pod([{"name": "c", "resources": {"requests": {}}}]))
    assert partial.resources.requests == ResourceSpec()
    assert partial.resources.limits is None


def test_non_string_quantities_read_as_absent(make_pod):
    (container,) = extract_containers(
        make_pod([{"name": "c", "resources": {"limits": {"cpu": 1, "memory": True}}}])
    )
    assert container.resources.limits.cpu is None
    assert container.resources.limits.memory is None


def test_security_context_type_mismatches_read_as_absent(make_pod):
    (container,) = extract_containers(
        make_pod([{"name": "c", "securityContext": {"runAsNonRoot": "false", "runAsUser": False}}])
    )
    assert container.security_context == SecurityContext()


def test_security_context_values(make_pod):
    (container,) = extract_containers(
        make_pod([{"name": "c", "securityContext": {"runAsNonRoot": False, "runAsUser": 1000}}])
    )
    assert container.security_context.run_as_non_root is False
    assert container.security_context.run_as_user == 1000
