from ..models import FieldNode, IngressRoute, Edge
from ..state import ProjectState
from ..create_manifests.models import DEFAULT_BACKEND_PORT

def route_edge_label(route: IngressRoute) -> str:
    host = route.host if route.host is not None else '*'
    if route.target_port_number:
        port = str(route.target_port_number)
    elif route.target_port_name:
        port = route.target_port_name
    else:
        port = str(DEFAULT_BACKEND_PORT)
    return f"{host} {route.path} → :{port}"

def resolve_source(route: IngressRoute, nodes: list[FieldNode]) -> FieldNode | None:
    for node in nodes:
        if node.id == route.field_id:
            return node
    return None

def _release_matches(release_name: str, service: str) -> bool:
    # helm names child services <release> or <release>-<chart>
    return release_name == service \
        or service.startswith(release_name + '-') \
        or service.startswith(release_name + '_') \
        or release_name.startswith(service)

def resolve_target(route: IngressRoute, nodes: list[FieldNode]) -> FieldNode | None:
    for node in nodes:
        if node.label == route.target_service and node.namespace == route.target_namespace:
            return node

    for node in nodes:
        if node.source != 'helm' or node.helm is None:
            continue
        if route.target_namespace not in (node.namespace, node.helm.namespace):
            continue
        if _release_matches(node.helm.release_name, route.target_service):
            return node
    return None

def resolve_edges(state: ProjectState) -> list[Edge]:
    """routes missing either endpoint are left out, they stay valid routes"""
    edges = []
    for route in state.routes:
        source = resolve_source(route, state.nodes)
        target = resolve_target(route, state.nodes)
        if source is None or target is None:
            continue
        edges.append(Edge(route=route, source=source, target=target, label=route_edge_label(route)))
    return edges
