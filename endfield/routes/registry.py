import os, asyncio, logging
from ..models import IngressRoute, DiscoveredRoute, FieldNode
from ..commands import ProjectFiles, ClusterCommands
from ..errors import EndfieldError
from ..state import ProjectState
from ..utils import route_to_ingress_name, generate_route_id
from ..lib.configuration import DEFAULT_INGRESS_CLASS
from ..create_manifests import get_ingress_route_yaml
from ..create_manifests.models import IDENTITY_KEYS
from .scanner import parse_ingress_route

logger = logging.getLogger(__name__)

ROUTES_DIR = 'routes'

def discovered_to_route(d: DiscoveredRoute) -> IngressRoute:
    return IngressRoute(
        route_id=d.route_id,
        field_id=d.field_id,
        target_namespace=d.target_namespace,
        target_service=d.target_service,
        target_port_number=d.target_port_number,
        target_port_name=d.target_port_name,
        host=d.host,
        path=d.path,
        path_type=d.path_type,
        tls_secret=d.tls_secret,
        tls_hosts=None,
        annotations=None,
        ingress_class_name=d.ingress_class_name,
        ingress_name=d.ingress_name,
        ingress_namespace=d.ingress_namespace,
    )

def merge_routes(file_routes: list[IngressRoute], cluster_routes: list[DiscoveredRoute]) -> list[IngressRoute]:
    """file routes win entirely on a shared route id, cluster-only routes are appended in discovery order"""
    merged: dict[str, IngressRoute] = {}
    for route in file_routes:
        merged.setdefault(route.route_id, route)
    for discovered in cluster_routes:
        if discovered.route_id not in merged:
            merged[discovered.route_id] = discovered_to_route(discovered)
    return list(merged.values())

def _check_annotations(annotations: list[tuple[str, str]] | None):
    for key, _ in annotations or []:
        if key in IDENTITY_KEYS:
            raise ValueError(f"annotation '{key}' is reserved for route identity")

def new_route(field_id: str, target_namespace: str, target_service: str,
        target_port_number: int | None = None,
        target_port_name: str | None = None,
        host: str | None = None,
        path: str = '/',
        path_type: str = 'Prefix',
        tls_secret: str | None = None,
        tls_hosts: list[str] | None = None,
        annotations: list[tuple[str, str]] | None = None,
        ingress_class_name: str = DEFAULT_INGRESS_CLASS,
        ingress_namespace: str | None = None) -> IngressRoute:
    _check_annotations(annotations)
    route_id = generate_route_id()
    return IngressRoute(
        route_id=route_id,
        field_id=field_id,
        target_namespace=target_namespace,
        target_service=target_service,
        target_port_number=target_port_number,
        target_port_name=target_port_name,
        host=host,
        path=path,
        path_type=path_type,
        tls_secret=tls_secret,
        tls_hosts=tls_hosts,
        annotations=annotations,
        ingress_class_name=ingress_class_name,
        ingress_name=route_to_ingress_name(route_id),
        ingress_namespace=ingress_namespace or target_namespace,
    )

def edit_route(route: IngressRoute, **changes) -> IngressRoute:
    """returns an edited copy. the route id and ingress name never change"""
    for immutable in ('route_id', 'ingress_name'):
        if immutable in changes:
            raise ValueError(f"'{immutable}' cannot be changed on an existing route")
    _check_annotations(changes.get('annotations'))
    return IngressRoute.model_validate(route.model_dump() | changes)

def route_file_dir(route: IngressRoute, nodes: list[FieldNode], project_path: str) -> str:
    """the directory of the ingress field that owns a route, e.g. <project>/infra/<release>"""
    for node in nodes:
        if node.id != route.field_id:
            continue
        helm_marker = f"{os.sep}helm{os.sep}"
        if helm_marker in node.file_path:
            return node.file_path[:node.file_path.index(helm_marker)]
        break
    return os.path.join(project_path, 'infra', route.field_id)

def route_file_path(route: IngressRoute, ingress_dir: str) -> str:
    return os.path.join(ingress_dir, ROUTES_DIR, f"{route.ingress_name}.yaml")

def is_route_file(path: str) -> bool:
    return f"{os.sep}{ROUTES_DIR}{os.sep}" in path and path.endswith(('.yaml', '.yml'))


class RouteRegistry:
    """Loads, saves and deletes route files, merging in what the cluster reports."""

    def __init__(self, state: ProjectState, files: ProjectFiles, cluster: ClusterCommands):
        self.state = state
        self.files = files
        self.cluster = cluster
        self._enrichment: asyncio.Task | None = None
        self._enriched_file_ids: set[str] = set()

    async def _load_file_routes(self, project_path: str) -> list[IngressRoute]:
        try:
            paths = await self.files.scan_project_files(os.path.join(project_path, 'infra'))
        except OSError as e:
            logger.error(f"Could not scan route files under {project_path}: {e}")
            return []

        routes = []
        for path in filter(is_route_file, paths):
            try:
                text = await self.files.read_yaml_file(path)
            except OSError as e:
                logger.warning(f"Skipping unreadable route file {path}: {e}")
                continue
            route = parse_ingress_route(text, path)
            if route is not None:
                routes.append(route)
        return routes

    async def _enrich(self, file_routes: list[IngressRoute]):
        try:
            cluster_routes = await self.cluster.discover_ingress_routes()
        except Exception as e:
            logger.warning(f"Background route discovery failed: {e}")
            return
        # visible on the next reload only
        self.state.pending_routes = merge_routes(file_routes, cluster_routes)
        self._enriched_file_ids = { r.route_id for r in file_routes }
        logger.debug(f"Background discovery merged {len(self.state.pending_routes)} route(s)")

    def _take_pending_cluster_routes(self, file_routes: list[IngressRoute]) -> list[IngressRoute]:
        if self.state.pending_routes is None:
            return []
        known = self._enriched_file_ids | { r.route_id for r in file_routes }
        extra = [r for r in self.state.pending_routes if r.route_id not in known]
        self.state.pending_routes = None
        return extra

    async def load_routes(self, project_path: str | None = None) -> list[IngressRoute]:
        project_path = project_path or self.state.project_path
        file_routes = await self._load_file_routes(project_path)

        if len(file_routes) > 0:
            routes = file_routes + self._take_pending_cluster_routes(file_routes)
            self._enrichment = asyncio.create_task(self._enrich(file_routes))
            self.state.routes = routes
            return routes

        try:
            cluster_routes = await self.cluster.discover_ingress_routes()
        except Exception as e:
            logger.warning(f"Route discovery failed, no routes loaded: {e}")
            cluster_routes = []
        routes = [discovered_to_route(d) for d in cluster_routes]
        self.state.routes = routes
        return routes

    async def wait_for_enrichment(self):
        if self._enrichment is not None:
            await self._enrichment

    def get_ingress_dir(self, route: IngressRoute) -> str:
        return route_file_dir(route, self.state.nodes, self.state.project_path)

    async def save_route(self, route: IngressRoute, ingress_dir: str | None = None) -> str:
        path = route_file_path(route, ingress_dir or self.get_ingress_dir(route))
        await self.files.save_yaml_file(path, get_ingress_route_yaml(route))
        self.state.upsert_route(route)
        return path

    async def delete_route(self, route: IngressRoute, ingress_dir: str | None = None) -> str:
        path = route_file_path(route, ingress_dir or self.get_ingress_dir(route))
        result = await self.files.delete_field_files([path], route.ingress_namespace)
        if result.file_errors:
            raise EndfieldError(f"Could not delete route file: {'; '.join(result.file_errors)}")
        self.state.remove_route(route.route_id)
        return path
