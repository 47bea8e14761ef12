from .models import ManifestArguments
from kubernetes import client

POSTGRES_CHECK = 'PGPASSWORD=$POSTGRES_PASSWORD psql -w -U "$POSTGRES_USER" -d "$POSTGRES_DB" -h 127.0.0.1 -c "SELECT 1"'

def _timing(probe: client.V1Probe, initial_delay: int, period: int, timeout: int, failure_threshold: int) -> client.V1Probe:
    probe.initial_delay_seconds = initial_delay
    probe.period_seconds = period
    probe.timeout_seconds = timeout
    probe.failure_threshold = failure_threshold
    return probe

def _exec(command: list[str]) -> client.V1Probe:
    return client.V1Probe(_exec=client.V1ExecAction(command=command))

def _tcp(port: int) -> client.V1Probe:
    return client.V1Probe(tcp_socket=client.V1TCPSocketAction(port=port))

def _http(path: str, port: int) -> client.V1Probe:
    return client.V1Probe(http_get=client.V1HTTPGetAction(path=path, port=port))

def create_probes(args: ManifestArguments) -> tuple[client.V1Probe, client.V1Probe]:
    """returns (liveness, readiness)"""
    key = args.preset.key
    port = args.port

    if key == 'postgres':
        command = ['bash', '-ec', POSTGRES_CHECK]
        return _timing(_exec(command), 30, 10, 5, 6), _timing(_exec(command), 5, 10, 5, 6)
    if key == 'mongodb':
        command = ['mongosh', '--eval', "db.adminCommand('ping')"]
        return _timing(_exec(command), 30, 10, 5, 6), _timing(_exec(command), 5, 10, 5, 6)
    if key == 'redis':
        command = ['redis-cli', 'ping']
        return _timing(_exec(command), 20, 5, 5, 5), _timing(_exec(command), 5, 5, 1, 5)
    if key in ('kafka', 'redpanda'):
        return _timing(_tcp(port), 60, 15, 5, 6), _timing(_tcp(port), 20, 10, 5, 6)
    if key == 'prometheus':
        return _timing(_http('/-/healthy', port), 30, 15, 10, 3), _timing(_http('/-/ready', port), 5, 5, 4, 3)
    if key == 'grafana':
        return _timing(_http('/api/health', port), 30, 10, 5, 3), _timing(_http('/api/health', port), 5, 10, 5, 3)
    return _timing(_http('/', port), 10, 10, 5, 3), _timing(_http('/', port), 5, 5, 3, 3)
