"""Shared fixtures: an in-memory ClusterCommands and a project state rooted in tmp_path."""

from __future__ import annotations

import asyncio

import pytest

from endfield.commands import ClusterCommands, ProjectFiles
from endfield.errors import CommandError
from endfield.models import (
    ApplyResult,
    ClusterStatus,
    DiscoveredRoute,
    HelmRenderResult,
)
from endfield.state import ProjectState


class FakeClusterCommands(ClusterCommands):
    """Records every call. Set `fail` to a command name to make that call raise CommandError."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.discovered: list[DiscoveredRoute] = []
        self.status = ClusterStatus()
        self.render = HelmRenderResult(rendered_files=["00-namespace-infra.yaml"])
        self.apply_success = True
        self.fail: set[str] = set()
        self.discovery_gate: asyncio.Event | None = None

    def _record(self, name: str, *args):
        self.calls.append((name, *args))
        if name in self.fail:
            raise CommandError(name, f"{name} exploded\nsecond line")

    async def kubectl_apply(self, path):
        self._record("kubectl_apply", path)
        return f"applied {path}"

    async def kubectl_delete_by_label(self, label, namespace):
        self._record("kubectl_delete_by_label", label, namespace)
        return f"deleted {label}"

    async def helm_template(self, component_dir, release_name, namespace):
        self._record("helm_template", component_dir, release_name, namespace)
        return self.render

    async def helm_install(self, component_dir, release_name, namespace):
        self._record("helm_install", component_dir, release_name, namespace)
        return f"installed {release_name}"

    async def helm_uninstall(self, release_name, namespace):
        self._record("helm_uninstall", release_name, namespace)
        return f"uninstalled {release_name}"

    async def discover_ingress_routes(self):
        self._record("discover_ingress_routes")
        if self.discovery_gate is not None:
            await self.discovery_gate.wait()
        return list(self.discovered)

    async def apply_ingress_route(self, route):
        self._record("apply_ingress_route", route.route_id)
        return ApplyResult(
            route_id=route.route_id,
            ingress_name=route.ingress_name,
            namespace=route.ingress_namespace,
            stdout="ingress configured" if self.apply_success else "",
            stderr="" if self.apply_success else "error: admission webhook denied\nmore",
            success=self.apply_success,
        )

    async def delete_ingress_route(self, ingress_name, namespace):
        self._record("delete_ingress_route", ingress_name, namespace)
        return f"deleted {ingress_name}"

    async def list_services_in_namespace(self, namespace):
        self._record("list_services_in_namespace", namespace)
        return []

    async def list_namespaces(self):
        self._record("list_namespaces")
        return ["default"]

    async def get_cluster_status(self):
        self._record("get_cluster_status")
        return self.status

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def cluster() -> FakeClusterCommands:
    return FakeClusterCommands()


@pytest.fixture
def files() -> ProjectFiles:
    return ProjectFiles()


@pytest.fixture
def state(tmp_path) -> ProjectState:
    return ProjectState(project_path=str(tmp_path))


def make_discovered(route_id: str = "abcdefgh12345678", **overrides) -> DiscoveredRoute:
    values = dict(
        route_id=route_id,
        field_id="helm-ingress-nginx",
        ingress_name=f"ef-route-{route_id[:8]}",
        ingress_namespace="apps",
        host="shop.example.com",
        path="/",
        path_type="Prefix",
        target_service="web",
        target_namespace="apps",
        target_port_number=8080,
        ingress_class_name="nginx",
        tls_secret=None,
        address="10.0.0.1",
    )
    values.update(overrides)
    return DiscoveredRoute(**values)
