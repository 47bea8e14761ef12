import os, logging, yaml
from typing import Any
from .models import FieldNode, HelmMeta, ScanResult
from .utils import image_to_type_id, chart_name_to_type_id, safe_resource_name

logger = logging.getLogger(__name__)

WORKLOAD_KINDS = ('Deployment', 'StatefulSet', 'DaemonSet', 'Job', 'CronJob', 'ReplicaSet', 'Pod')
SKIPPED_DIRS = ('node_modules', 'vendor', 'charts', 'rendered')

# lower wins when two nodes describe the same workload
KIND_PRIORITY = {
    'StatefulSet': 1,
    'Deployment': 2,
    'DaemonSet': 3,
    'ReplicaSet': 4,
    'Job': 5,
    'CronJob': 6,
    'Pod': 7,
}
HELM_PRIORITY = 0
OTHER_PRIORITY = 8

def _load_yaml(path: str) -> Any:
    with open(path, 'r') as f:
        return yaml.safe_load(f)

def _find_images(data: Any) -> list[str]:
    images = []
    if isinstance(data, dict):
        for k, v in data.items():
            if k == 'image' and isinstance(v, str):
                if v.strip() and not v.startswith('{{'):
                    images.append(v.strip())
            else:
                images += _find_images(v)
    elif isinstance(data, list):
        for item in data:
            images += _find_images(item)
    return images

def try_parse_helm_node(component_dir: str) -> FieldNode | None:
    """a directory holding helm/Chart.yaml with a dependency is a wrapper chart release"""
    chart_path = os.path.join(component_dir, 'helm', 'Chart.yaml')
    if not os.path.isfile(chart_path):
        return None
    try:
        chart = _load_yaml(chart_path) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Could not read wrapper chart {chart_path}: {e}")
        return None

    dependencies = chart.get('dependencies') if isinstance(chart, dict) else None
    if not dependencies or not isinstance(dependencies[0], dict) or not dependencies[0].get('name'):
        return None
    dependency = dependencies[0]
    chart_name = str(dependency['name'])
    chart_version = str(dependency.get('version') or '')
    repo = str(dependency.get('repository') or '')

    release_name = os.path.basename(os.path.normpath(component_dir))
    namespace_path = os.path.join(component_dir, 'namespace.yaml')
    if os.path.isfile(namespace_path):
        try:
            namespace_doc = _load_yaml(namespace_path) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Could not read {namespace_path}: {e}")
            namespace_doc = {}
        metadata = namespace_doc.get('metadata') if isinstance(namespace_doc, dict) else None
        namespace = str(metadata.get('name') or 'infra') if isinstance(metadata, dict) else 'infra'
    else:
        namespace = f"infra-{release_name}"

    return FieldNode(
        id=f"helm-{release_name}",
        label=release_name,
        kind='HelmRelease',
        image=f"helm:{chart_name}/{chart_version}",
        type_id=chart_name_to_type_id(chart_name),
        namespace=namespace,
        file_path=chart_path,
        source='helm',
        helm=HelmMeta(
            release_name=release_name,
            namespace=namespace,
            chart_name=chart_name,
            chart_version=chart_version,
            repo=repo,
            values_path=os.path.join(component_dir, 'helm', 'values.yaml'),
            rendered_dir=os.path.join(component_dir, 'rendered'),
        ),
    )

def parse_workload_doc(doc: dict[str, Any], path: str, idx: int) -> FieldNode | None:
    kind = doc.get('kind')
    if kind not in WORKLOAD_KINDS:
        return None
    metadata = doc.get('metadata') if isinstance(doc.get('metadata'), dict) else {}
    name = str(metadata.get('name') or 'unknown')
    namespace = str(metadata.get('namespace') or 'default')
    spec = doc.get('spec') if isinstance(doc.get('spec'), dict) else {}
    replicas = spec.get('replicas') if isinstance(spec.get('replicas'), int) else None

    images = _find_images(spec)
    image = images[0] if images else ''
    type_id = image_to_type_id(image) if image else 'service'

    stem = os.path.splitext(os.path.basename(path))[0]
    return FieldNode(
        id=f"{safe_resource_name(name)}-{stem}-{idx}",
        label=name,
        kind=kind,
        image=image,
        type_id=type_id,
        namespace=namespace,
        file_path=path,
        replicas=replicas,
        source='raw',
    )

def parse_manifest_file(path: str) -> tuple[list[FieldNode], list[str]]:
    with open(path, 'r') as f:
        content = f.read()
    nodes, errors = [], []
    for idx, doc in enumerate(content.split('\n---')):
        try:
            data = yaml.safe_load(doc)
        except yaml.YAMLError as e:
            errors.append(f"{path}: document {idx}: {e}")
            continue
        if not isinstance(data, dict):
            continue
        node = parse_workload_doc(data, path, idx)
        if node is not None:
            nodes.append(node)
    return nodes, errors

def _scan_dir(directory: str, nodes: list[FieldNode], errors: list[str]):
    try:
        entries = sorted(os.listdir(directory))
    except OSError as e:
        errors.append(f"Cannot read: {directory}: {e}")
        return

    for name in entries:
        path = os.path.join(directory, name)
        if os.path.isdir(path):
            if name.startswith('.') or name in SKIPPED_DIRS:
                continue
            helm_node = try_parse_helm_node(path)
            if helm_node is not None:
                nodes.append(helm_node)
                continue
            _scan_dir(path, nodes, errors)
        elif os.path.isfile(path) and name.endswith(('.yaml', '.yml')):
            try:
                file_nodes, file_errors = parse_manifest_file(path)
            except OSError as e:
                errors.append(f"{path}: {e}")
                continue
            nodes += file_nodes
            errors += file_errors

def _priority(node: FieldNode) -> int:
    if node.source == 'helm':
        return HELM_PRIORITY
    return KIND_PRIORITY.get(node.kind, OTHER_PRIORITY)

def _dedupe_key(node: FieldNode) -> str:
    if node.kind in WORKLOAD_KINDS:
        return f"{node.label}::{node.namespace}"
    return f"{node.kind}::{node.label}::{node.namespace}"

def scan_project(project_path: str) -> ScanResult:
    """
    Builds the field nodes of a project directory.

    Raw workloads that describe the same label and namespace collapse into one
    node, preferring StatefulSet over Deployment and so on. Every node id gets
    its position appended so ids stay unique within a scan.
    """
    if not os.path.isdir(project_path):
        return ScanResult(project_path=project_path, errors=[f"Path does not exist: {project_path}"])

    nodes: list[FieldNode] = []
    errors: list[str] = []
    _scan_dir(project_path, nodes, errors)

    seen: dict[str, int] = {}
    deduped: list[FieldNode] = []
    for node in nodes:
        key = _dedupe_key(node)
        if key in seen:
            existing = seen[key]
            if _priority(node) < _priority(deduped[existing]):
                deduped[existing] = node
            continue
        seen[key] = len(deduped)
        deduped.append(node)

    result = [n.model_copy(update={ 'id': f"{n.id}-{i}" }) for i, n in enumerate(deduped)]
    for error in errors:
        logger.warning(error)
    return ScanResult(nodes=result, project_path=project_path, errors=errors)
