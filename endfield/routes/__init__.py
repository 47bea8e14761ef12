from .scanner import parse_ingress_route
from .registry import (
    RouteRegistry, merge_routes, discovered_to_route, new_route, edit_route,
    route_file_dir, route_file_path,
)
from .edges import route_edge_label, resolve_source, resolve_target, resolve_edges
