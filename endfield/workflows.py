import os, re, logging
from dataclasses import dataclass, field
from .models import (
    Preset, HelmPreset, EnvVar, FieldNode, HelmMeta, IngressRoute, ApplyResult,
    DeleteMode, DeleteReport, GeneratedFileSet,
)
from .commands import ProjectFiles, ClusterCommands
from .create_manifests import synthesize_raw, synthesize_helm
from .create_manifests.helm import get_component_dir
from .errors import PersistenceError, ApplyError, CommandError
from .routes.registry import RouteRegistry
from .state import ProjectState
from .utils import sanitize_name

logger = logging.getLogger(__name__)

RELATED_SUFFIXES = ('secret', 'configmap', 'pvc', 'service', 'headless-svc')

def derive_related_files(main_file_path: str) -> list[str]:
    """the workload file plus the sibling manifests generated alongside it"""
    if not main_file_path:
        return []
    directory, file_name = os.path.split(main_file_path)
    base = re.sub(r'-(statefulset|deployment)\.ya?ml$', '', file_name)
    base = re.sub(r'\.ya?ml$', '', base)
    files = [main_file_path]
    for suffix in RELATED_SUFFIXES:
        sibling = os.path.join(directory, f"{base}-{suffix}.yaml")
        if sibling != main_file_path:
            files.append(sibling)
    return files

def get_helm_component_dir(node: FieldNode) -> str:
    marker = f"{os.sep}helm{os.sep}"
    if marker in node.file_path:
        return node.file_path[:node.file_path.rindex(marker)]
    return os.path.dirname(node.file_path)


@dataclass
class FieldCreation:
    node: FieldNode
    saved_files: list[str] = field(default_factory=list)
    apply_output: list[str] = field(default_factory=list)


class Workflows:
    def __init__(self, state: ProjectState, files: ProjectFiles, cluster: ClusterCommands, registry: RouteRegistry | None = None):
        self.state = state
        self.files = files
        self.cluster = cluster
        self.registry = registry or RouteRegistry(state, files, cluster)

    async def save_files(self, files: GeneratedFileSet) -> list[str]:
        """
        Writes every file in order. A failure does not stop the batch, the first
        failing file is raised once the rest have been attempted.
        """
        saved = []
        first_error: PersistenceError | None = None
        for rel_path, content in files.items():
            path = os.path.join(self.state.project_path, rel_path)
            try:
                await self.files.save_yaml_file(path, content)
            except OSError as e:
                logger.error(f"Failed to save {rel_path}: {e}")
                if first_error is None:
                    first_error = PersistenceError(rel_path, str(e))
                continue
            saved.append(path)
        if first_error is not None:
            raise first_error
        return saved

    async def _run(self, command: str, coro):
        try:
            return await coro
        except CommandError as e:
            raise ApplyError(command, e.message)

    async def create_raw_field(self, name: str, preset: Preset, namespace: str, port: int | None = None,
            env_vars: list[EnvVar] | None = None, apply: bool = False) -> FieldCreation:
        port = port or preset.default_port
        env_vars = preset.env_vars if env_vars is None else env_vars
        files = synthesize_raw(name, preset, namespace, port, env_vars)
        saved = await self.save_files(files)

        component = sanitize_name(name)
        workload_path = os.path.join(self.state.project_path, preset.folder, f"{component}-{preset.kind.lower()}.yaml")
        node = FieldNode(
            id=f"{component}-{preset.kind.lower()}",
            label=component,
            kind=preset.kind,
            image=preset.image,
            type_id=preset.type_id,
            namespace=namespace,
            file_path=workload_path,
            replicas=preset.replicas,
            source='raw',
        )
        creation = FieldCreation(node=node, saved_files=saved)

        if apply:
            # namespace.yaml is always first in the file set
            for path in saved:
                logger.info(f"Applying {path}")
                creation.apply_output.append(await self._run(f"kubectl apply -f {path}", self.cluster.kubectl_apply(path)))

        self.state.add_node(node)
        return creation

    async def create_helm_field(self, release_name: str, helm_preset: HelmPreset, apply: bool = False) -> FieldCreation:
        files = synthesize_helm(release_name, helm_preset)
        saved = await self.save_files(files)

        component_dir = os.path.join(self.state.project_path, get_component_dir(release_name))
        namespace = helm_preset.default_namespace
        node = FieldNode(
            id=f"helm-{release_name}",
            label=release_name,
            kind='HelmRelease',
            image=f"helm:{helm_preset.chart_name}/{helm_preset.version}",
            type_id=helm_preset.type_id,
            namespace=namespace,
            file_path=os.path.join(component_dir, 'helm', 'Chart.yaml'),
            source='helm',
            helm=HelmMeta(
                release_name=release_name,
                namespace=namespace,
                chart_name=helm_preset.chart_name,
                chart_version=helm_preset.version,
                repo=helm_preset.repo,
                values_path=os.path.join(component_dir, 'helm', 'values.yaml'),
                rendered_dir=os.path.join(component_dir, 'rendered'),
            ),
        )
        creation = FieldCreation(node=node, saved_files=saved)

        if apply:
            render = await self._run('helm template', self.cluster.helm_template(component_dir, release_name, namespace))
            if render.error:
                raise ApplyError('helm template', render.error)
            for warning in render.warnings:
                logger.warning(f"helm template {release_name}: {warning}")
            creation.apply_output += render.rendered_files
            creation.apply_output.append(await self._run('helm install', self.cluster.helm_install(component_dir, release_name, namespace)))

        self.state.add_node(node)
        return creation

    async def _delete_from_cluster(self, node: FieldNode) -> str:
        if node.source == 'helm' and node.helm is not None:
            return await self.cluster.helm_uninstall(node.helm.release_name, node.helm.namespace)
        return await self.cluster.kubectl_delete_by_label(f"app={node.label}", node.namespace)

    def _disk_paths(self, node: FieldNode) -> list[str]:
        if not node.file_path:
            return []
        if node.source == 'helm':
            return [get_helm_component_dir(node)]
        return derive_related_files(node.file_path)

    async def delete_field(self, node: FieldNode, mode: DeleteMode) -> DeleteReport:
        report = DeleteReport(mode=mode, field_id=node.id)

        if mode == DeleteMode.FULL:
            report.disk = await self.files.delete_field_files(self._disk_paths(node), node.namespace)

        if mode in (DeleteMode.FULL, DeleteMode.CLUSTER_ONLY):
            # best effort, files already removed are not restored
            try:
                report.cluster_output = await self._delete_from_cluster(node)
            except CommandError as e:
                logger.warning(f"Cluster removal of {node.label} failed: {e}")
                report.cluster_error = e.message

        if mode in (DeleteMode.FULL, DeleteMode.VIEW_ONLY):
            self.state.remove_node(node.id)
            report.removed_from_view = True

        return report

    async def save_route(self, route: IngressRoute, apply: bool = False) -> tuple[str, ApplyResult | None]:
        path = await self.registry.save_route(route)
        if not apply:
            return path, None
        result = await self._run('kubectl apply', self.cluster.apply_ingress_route(route))
        if not result.success:
            raise ApplyError(f"kubectl apply ingress {route.ingress_name}", result.stderr)
        return path, result

    async def delete_route(self, route: IngressRoute, from_cluster: bool = True) -> str:
        if from_cluster:
            await self._run('kubectl delete ingress', self.cluster.delete_ingress_route(route.ingress_name, route.ingress_namespace))
        return await self.registry.delete_route(route)
