import re, secrets, string
from .models import EnvVar

INGRESS_NAME_PREFIX = 'ef-route-'
SECRET_KEY_MARKERS = ('PASSWORD', 'SECRET', 'KEY', 'TOKEN', 'PASS')
ROUTE_ID_ALPHABET = string.ascii_lowercase + string.digits
ROUTE_ID_LENGTH = 16

def sanitize_name(s: str) -> str:
    return re.sub(r'[^a-z0-9-]', '-', s.lower())

def safe_resource_name(s: str) -> str:
    return s.replace('/', '-').replace('.', '-')

def is_secret_key(key: str) -> bool:
    upper = key.upper()
    return any(marker in upper for marker in SECRET_KEY_MARKERS)

def route_to_ingress_name(route_id: str) -> str:
    # two ids sharing their first 8 characters map to the same ingress
    return f"{INGRESS_NAME_PREFIX}{route_id[:8]}"

def generate_route_id() -> str:
    return ''.join(secrets.choice(ROUTE_ID_ALPHABET) for _ in range(ROUTE_ID_LENGTH))

def merge_env_vars(base: list[EnvVar], overrides: dict[str, str]) -> list[EnvVar]:
    """overrides replace values by key in place, new keys are appended in the order given"""
    merged = [EnvVar(key=e.key, value=overrides.get(e.key, e.value)) for e in base]
    existing = { e.key for e in base }
    for k, v in overrides.items():
        if k not in existing:
            merged.append(EnvVar(key=k, value=v))
    return merged

_IMAGE_TYPE_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ('gateway', ('nginx', 'traefik', 'haproxy', 'envoy')),
    ('cache', ('redis',)),
    ('database', ('postgres', 'mysql', 'mongo', 'mariadb', 'cockroach', 'cassandra', 'clickhouse')),
    ('queue', ('kafka', 'rabbitmq', 'nats', 'pulsar', 'activemq', 'redpanda')),
    ('monitoring', ('prometheus', 'grafana', 'jaeger', 'elasticsearch', 'kibana', 'fluentd')),
    ('infra', ('cert-manager', 'certmanager')),
]

_CHART_TYPE_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ('gateway', ('nginx', 'traefik', 'ingress')),
    ('cache', ('redis',)),
    ('database', ('postgres', 'mysql', 'mongo', 'mariadb')),
    ('queue', ('kafka', 'rabbitmq', 'nats', 'redpanda')),
    ('monitoring', ('prometheus', 'grafana', 'loki', 'kube-prometheus')),
    ('infra', ('cert-manager', 'vault', 'external-secrets')),
]

def _match_type(value: str, table: list[tuple[str, tuple[str, ...]]]) -> str:
    for type_id, keywords in table:
        if any(k in value for k in keywords):
            return type_id
    return 'service'

def image_to_type_id(image: str) -> str:
    # registry/repo:tag -> repo
    repo = image.lower().split(':')[0].split('/')[-1]
    return _match_type(repo, _IMAGE_TYPE_KEYWORDS)

def chart_name_to_type_id(chart: str) -> str:
    return _match_type(chart.lower(), _CHART_TYPE_KEYWORDS)
