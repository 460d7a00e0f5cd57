from __future__ import annotations

from typing import Any, List, Optional, Sequence

from .models import Container, Resource, Resources, ResourceSpec, SecurityContext
from .values import (
    as_mapping,
    as_optional_bool,
    as_optional_int,
    as_optional_str,
    as_sequence,
    as_str,
    get_path,
    has_key,
)


def extract_containers(resource: Resource) -> List[Container]:
    """
    Pull the container list out of a manifest.

    Supported shapes, tried in order:
    - workloads wrapping a pod template: spec.template.spec.containers
      (Deployment, StatefulSet, DaemonSet, Job, ReplicaSet, ...)
    - bare pods: spec.containers

    Once a `template` key is present the pod-template path wins, even if it
    yields nothing; spec.containers is only read when there is no template.
    """
    spec = resource.spec
    if has_key(spec, "template"):
        return _parse_containers(as_sequence(get_path(spec, "template", "spec", "containers")))
    return _parse_containers(as_sequence(spec.get("containers")))


def _parse_containers(items: Optional[Sequence[Any]]) -> List[Container]:
    if items is None:
        return []
    return [_parse_container(item) for item in items if as_mapping(item) is not None]


def _parse_container(raw: Any) -> Container:
    return Container(
        name=as_str(raw.get("name")),
        image=as_str(raw.get("image")),
        resources=_parse_resources(raw.get("resources")),
        security_context=_parse_security_context(raw.get("securityContext")),
    )


def _parse_resources(raw: Any) -> Optional[Resources]:
    body = as_mapping(raw)
    if body is None:
        return None
    return Resources(
        requests=_parse_resource_spec(body.get("requests")),
        limits=_parse_resource_spec(body.get("limits")),
    )


def _parse_resource_spec(raw: Any) -> Optional[ResourceSpec]:
    body = as_mapping(raw)
    if body is None:
        return None
    return ResourceSpec(
        cpu=as_optional_str(body.get("cpu")),
        memory=as_optional_str(body.get("memory")),
    )


def _parse_security_context(raw: Any) -> Optional[SecurityContext]:
    body = as_mapping(raw)
    if body is None:
        return None
    return SecurityContext(
        run_as_non_root=as_optional_bool(body.get("runAsNonRoot")),
        run_as_user=as_optional_int(body.get("runAsUser")),
    )
