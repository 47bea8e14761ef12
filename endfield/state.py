from dataclasses import dataclass, field
from .models import FieldNode, IngressRoute


@dataclass
class ProjectState:
    """The nodes and routes of one open project. Passed explicitly to the registry and resolver."""
    project_path: str
    nodes: list[FieldNode] = field(default_factory=list)
    routes: list[IngressRoute] = field(default_factory=list)
    # merged file+cluster routes from the last background enrichment, applied on the next reload
    pending_routes: list[IngressRoute] | None = None

    def get_node(self, node_id: str) -> FieldNode | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def add_node(self, node: FieldNode):
        self.nodes = [n for n in self.nodes if n.id != node.id] + [node]

    def remove_node(self, node_id: str) -> FieldNode | None:
        node = self.get_node(node_id)
        if node is not None:
            self.nodes = [n for n in self.nodes if n.id != node_id]
        return node

    def get_route(self, route_id: str) -> IngressRoute | None:
        for route in self.routes:
            if route.route_id == route_id:
                return route
        return None

    def upsert_route(self, route: IngressRoute):
        for i, existing in enumerate(self.routes):
            if existing.route_id == route.route_id:
                self.routes[i] = route
                return
        self.routes.append(route)

    def remove_route(self, route_id: str) -> IngressRoute | None:
        route = self.get_route(route_id)
        if route is not None:
            self.routes = [r for r in self.routes if r.route_id != route_id]
        return route

    def routes_for_field(self, field_id: str) -> list[IngressRoute]:
        return [r for r in self.routes if r.field_id == field_id]
