from kubernetes import client

# preset key -> (request cpu, request memory, limit cpu, limit memory)
RESOURCE_TABLE: dict[str, tuple[str, str, str, str]] = {
    'postgres': ('250m', '256Mi', '1000m', '1Gi'),
    'mongodb': ('250m', '256Mi', '1000m', '1Gi'),
    'redis': ('100m', '128Mi', '500m', '512Mi'),
    'kafka': ('500m', '1Gi', '2000m', '4Gi'),
    'redpanda': ('500m', '1Gi', '2000m', '4Gi'),
    'nginx': ('50m', '64Mi', '250m', '256Mi'),
    'ingress-nginx': ('100m', '128Mi', '500m', '512Mi'),
    'grafana': ('100m', '128Mi', '500m', '512Mi'),
    'prometheus': ('250m', '512Mi', '1000m', '2Gi'),
    'custom': ('50m', '64Mi', '500m', '512Mi'),
}
DEFAULT_RESOURCE_KEY = 'custom'

def create_resource_requirements(preset_key: str) -> client.V1ResourceRequirements:
    request_cpu, request_memory, limit_cpu, limit_memory = RESOURCE_TABLE.get(preset_key, RESOURCE_TABLE[DEFAULT_RESOURCE_KEY])
    return client.V1ResourceRequirements(
        requests={ 'cpu': request_cpu, 'memory': request_memory },
        limits={ 'cpu': limit_cpu, 'memory': limit_memory },
    )
