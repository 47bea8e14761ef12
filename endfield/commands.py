import os, shutil, asyncio, logging
from abc import ABC, abstractmethod
from .models import (
    DeleteResult, HelmRenderResult, DiscoveredRoute, IngressRoute, ApplyResult,
    ClusterStatus,
)
from .create_manifests import get_ingress_route_yaml, split_rendered_manifests
from .errors import CommandError

logger = logging.getLogger(__name__)

YAML_EXTENSIONS = ('.yaml', '.yml')
IGNORED_DIRS = ('node_modules', 'vendor')

def _is_ignored(name: str) -> bool:
    return name.startswith('.') or name in IGNORED_DIRS

def _scan_yaml_paths(folder: str) -> list[str]:
    result = []
    if not os.path.isdir(folder):
        return result
    for name in sorted(os.listdir(folder)):
        if _is_ignored(name):
            continue
        path = os.path.join(folder, name)
        if os.path.isdir(path):
            result += _scan_yaml_paths(path)
        elif os.path.isfile(path) and name.endswith(YAML_EXTENSIONS):
            result.append(path)
    return result

def _read_file(path: str) -> str:
    with open(path, 'r') as f:
        return f.read()

def _write_file(path: str, content: str):
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, 'w') as f:
        f.write(content)

def _delete_paths(paths: list[str]) -> DeleteResult:
    result = DeleteResult()
    for path in paths:
        if not os.path.exists(path):
            result.missing_files.append(path)
            continue
        is_dir = os.path.isdir(path)
        try:
            if is_dir:
                shutil.rmtree(path)
            else:
                os.remove(path)
        except OSError as e:
            result.file_errors.append(f"{path}: {e}")
            continue
        result.deleted_files.append(path)

        # a file that was the last entry of its folder takes the folder with it
        if not is_dir:
            parent = os.path.dirname(path)
            if parent and os.path.isdir(parent) and len(os.listdir(parent)) == 0:
                try:
                    os.rmdir(parent)
                except OSError as e:
                    logger.warning(f"Could not remove empty directory {parent}: {e}")
    return result


def _replace_rendered(rendered_dir: str, raw: str) -> list[str]:
    for name in os.listdir(rendered_dir) if os.path.isdir(rendered_dir) else []:
        if name.endswith(YAML_EXTENSIONS):
            os.remove(os.path.join(rendered_dir, name))
    paths = []
    for file_name, content in split_rendered_manifests(raw):
        path = os.path.join(rendered_dir, file_name)
        _write_file(path, content)
        paths.append(path)
    return paths


class ProjectFiles:
    """Local file half of the command surface."""

    async def scan_project_files(self, folder: str) -> list[str]:
        return await asyncio.to_thread(_scan_yaml_paths, folder)

    async def read_yaml_file(self, path: str) -> str:
        return await asyncio.to_thread(_read_file, path)

    async def save_yaml_file(self, path: str, content: str):
        await asyncio.to_thread(_write_file, path, content)

    async def delete_field_files(self, paths: list[str], namespace: str) -> DeleteResult:
        logger.debug(f"Deleting {len(paths)} path(s) for namespace {namespace}")
        return await asyncio.to_thread(_delete_paths, paths)

    async def save_rendered_manifests(self, rendered_dir: str, raw: str) -> list[str]:
        """replaces the yaml files in rendered_dir with the split output of `helm template`"""
        return await asyncio.to_thread(_replace_rendered, rendered_dir, raw)


class ClusterCommands(ABC):
    """
    kubectl/helm half of the command surface. Implementations raise CommandError
    when the underlying invocation fails.
    """

    @abstractmethod
    async def kubectl_apply(self, path: str) -> str: ...

    @abstractmethod
    async def kubectl_delete_by_label(self, label: str, namespace: str) -> str: ...

    @abstractmethod
    async def helm_template(self, component_dir: str, release_name: str, namespace: str) -> HelmRenderResult: ...

    @abstractmethod
    async def helm_install(self, component_dir: str, release_name: str, namespace: str) -> str: ...

    @abstractmethod
    async def helm_uninstall(self, release_name: str, namespace: str) -> str: ...

    @abstractmethod
    async def discover_ingress_routes(self) -> list[DiscoveredRoute]: ...

    @abstractmethod
    async def apply_ingress_route(self, route: IngressRoute) -> ApplyResult: ...

    @abstractmethod
    async def delete_ingress_route(self, ingress_name: str, namespace: str) -> str: ...

    @abstractmethod
    async def list_services_in_namespace(self, namespace: str) -> list[tuple[str, list[str]]]: ...

    @abstractmethod
    async def list_namespaces(self) -> list[str]: ...

    @abstractmethod
    async def get_cluster_status(self) -> ClusterStatus: ...

    def get_ingress_route_yaml(self, route: IngressRoute) -> str:
        return get_ingress_route_yaml(route)


class OfflineClusterCommands(ClusterCommands):
    """Used when no cluster is reachable. Every call raises CommandError."""

    def _unavailable(self, command: str):
        raise CommandError(command, 'no cluster connection')

    async def kubectl_apply(self, path):
        self._unavailable('kubectl apply')

    async def kubectl_delete_by_label(self, label, namespace):
        self._unavailable('kubectl delete')

    async def helm_template(self, component_dir, release_name, namespace):
        self._unavailable('helm template')

    async def helm_install(self, component_dir, release_name, namespace):
        self._unavailable('helm install')

    async def helm_uninstall(self, release_name, namespace):
        self._unavailable('helm uninstall')

    async def discover_ingress_routes(self):
        self._unavailable('kubectl get ingress')

    async def apply_ingress_route(self, route):
        self._unavailable('kubectl apply')

    async def delete_ingress_route(self, ingress_name, namespace):
        self._unavailable('kubectl delete ingress')

    async def list_services_in_namespace(self, namespace):
        self._unavailable('kubectl get services')

    async def list_namespaces(self):
        self._unavailable('kubectl get namespaces')

    async def get_cluster_status(self):
        self._unavailable('kubectl get pods')
