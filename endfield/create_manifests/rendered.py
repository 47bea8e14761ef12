import yaml, logging
from ..utils import safe_resource_name

logger = logging.getLogger(__name__)

KIND_ORDER = {
    'Namespace': 0,
    'ServiceAccount': 1,
    'ClusterRole': 2,
    'ClusterRoleBinding': 3,
    'Role': 4,
    'RoleBinding': 5,
    'ConfigMap': 6,
    'Secret': 7,
    'PersistentVolumeClaim': 8,
    'Service': 9,
    'Deployment': 10,
    'StatefulSet': 11,
    'DaemonSet': 12,
    'Job': 13,
    'CronJob': 14,
    'Ingress': 15,
    'IngressClass': 16,
    'CustomResourceDefinition': 17,
}
UNKNOWN_KIND_ORDER = 50

def _is_blank(doc: str) -> bool:
    return all(l.strip() == '' or l.strip().startswith('#') for l in doc.splitlines())

def _describe(doc: str) -> tuple[str, str]:
    try:
        data = yaml.safe_load(doc)
    except yaml.YAMLError as e:
        logger.warning(f"Could not parse rendered document, keeping it as Unknown: {e}")
        data = None
    if not isinstance(data, dict):
        return 'Unknown', 'resource'
    kind = str(data.get('kind') or 'Unknown')
    metadata = data.get('metadata') or {}
    name = str(metadata.get('name') or 'resource') if isinstance(metadata, dict) else 'resource'
    return kind, name

def split_rendered_manifests(raw: str) -> list[tuple[str, str]]:
    """
    splits `helm template` output into (file name, content) pairs.
    files are ordered so that applying them in sequence satisfies dependencies,
    and named NN-<kind>-<name>.yaml
    """
    docs = []
    for doc in raw.split('\n---'):
        doc = doc.strip()
        if doc.startswith('---'):
            doc = doc[3:].strip()
        if doc == '' or _is_blank(doc):
            continue
        kind, name = _describe(doc)
        order = KIND_ORDER.get(kind, UNKNOWN_KIND_ORDER)
        file_name = f"{kind.lower()}-{safe_resource_name(name)}.yaml"
        docs.append((order, file_name, doc + '\n'))

    docs.sort(key=lambda d: (d[0], d[1]))
    return [(f"{i:02}-{file_name}", content) for i, (_, file_name, content) in enumerate(docs)]
