from .models import MANAGED_BY_LABEL, MANAGED_BY_VALUE
from typing import Any
from kubernetes import client

def create_namespace_manifest(namespace: str, extra_labels: dict[str, str] | None = None) -> dict[str, Any]:
    ns = client.V1Namespace(
        api_version="v1",
        kind="Namespace",
        metadata=client.V1ObjectMeta(
            name=namespace,
            labels={ MANAGED_BY_LABEL: MANAGED_BY_VALUE } | (extra_labels or {}),
        ),
    )
    return client.ApiClient().sanitize_for_serialization(ns) # type: ignore[no-any-return]
