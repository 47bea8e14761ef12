from __future__ import annotations

from endfield.models import FieldNode, HelmMeta, IngressRoute
from endfield.routes import resolve_edges, resolve_source, resolve_target, route_edge_label
from endfield.state import ProjectState


def route(**overrides) -> IngressRoute:
    values = dict(
        route_id="r1r1r1r1r1",
        field_id="helm-ingress-nginx-0",
        target_namespace="infra-redis",
        target_service="redis-master",
        target_port_number=6379,
        host="cache.example.com",
        path="/",
        ingress_class_name="nginx",
        ingress_name="ef-route-r1r1r1r1",
        ingress_namespace="infra-redis",
    )
    values.update(overrides)
    return IngressRoute(**values)


def helm_node(release: str, namespace: str, node_id: str | None = None) -> FieldNode:
    return FieldNode(
        id=node_id or f"helm-{release}-0",
        label=release,
        kind="HelmRelease",
        namespace=namespace,
        source="helm",
        helm=HelmMeta(
            release_name=release,
            namespace=namespace,
            chart_name=release,
            chart_version="1.0.0",
            repo="https://charts.example.com",
            values_path=f"infra/{release}/helm/values.yaml",
            rendered_dir=f"infra/{release}/rendered",
        ),
    )


def raw_node(label: str, namespace: str) -> FieldNode:
    return FieldNode(id=f"{label}-deployment-0", label=label, kind="Deployment", namespace=namespace)


class TestEdgeLabel:
    def test_null_host_is_wildcard(self):
        assert route_edge_label(route(host=None)).startswith("* ")

    def test_no_port_defaults_to_80(self):
        assert route_edge_label(route(target_port_number=None)).endswith(":80")

    def test_named_port(self):
        assert route_edge_label(route(target_port_number=None, target_port_name="http")).endswith(":http")

    def test_full_label(self):
        assert route_edge_label(route(path="/api")) == "cache.example.com /api → :6379"


class TestResolve:
    def test_source_by_field_id(self):
        ingress = helm_node("ingress-nginx", "infra-ingress-nginx")

        assert resolve_source(route(), [ingress]) is ingress
        assert resolve_source(route(field_id="missing"), [ingress]) is None

    def test_exact_service_match_wins(self):
        exact = raw_node("redis-master", "infra-redis")
        release = helm_node("redis", "infra-redis")

        assert resolve_target(route(), [release, exact]) is exact

    def test_helm_release_prefix(self):
        release = helm_node("redis", "infra-redis")

        assert resolve_target(route(), [release]) is release

    def test_helm_release_in_other_namespace_is_not_matched(self):
        release = helm_node("redis", "infra-other")

        assert resolve_target(route(), [release]) is None

    def test_raw_nodes_have_no_prefix_rule(self):
        assert resolve_target(route(), [raw_node("redis", "infra-redis")]) is None

    def test_unrelated_release(self):
        assert resolve_target(route(), [helm_node("postgres", "infra-redis")]) is None


class TestResolveEdges:
    def test_edges_skip_unresolved_routes(self):
        ingress = helm_node("ingress-nginx", "infra-ingress-nginx")
        redis = helm_node("redis", "infra-redis")
        resolved = route()
        dangling = route(route_id="r2r2r2r2r2", ingress_name="ef-route-r2r2r2r2", target_service="nothing-here")
        state = ProjectState(project_path="/p", nodes=[ingress, redis], routes=[resolved, dangling])

        edges = resolve_edges(state)

        assert len(edges) == 1
        assert edges[0].source == ingress
        assert edges[0].target == redis
        assert edges[0].route == resolved
        assert edges[0].label == "cache.example.com / → :6379"
        # the dangling route is still part of the project
        assert state.routes == [resolved, dangling]
