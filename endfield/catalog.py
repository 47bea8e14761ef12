from .models import Preset, HelmPreset, EnvVar

def _env(**kwargs) -> list[EnvVar]:
    return [EnvVar(key=k, value=v) for k, v in kwargs.items()]

FIELD_PRESETS: dict[str, Preset] = { p.key: p for p in [
    Preset(
        key='postgres',
        type_id='database',
        image='postgres:16-alpine',
        default_port=5432,
        kind='StatefulSet',
        replicas=1,
        description='PostgreSQL relational database',
        folder='databases',
        generate_config_map=True,
        generate_service=True,
        storage_size='10Gi',
        env_vars=_env(POSTGRES_DB='appdb', POSTGRES_USER='postgres', POSTGRES_PASSWORD='changeme'),
    ),
    Preset(
        key='mongodb',
        type_id='database',
        image='mongo:7',
        default_port=27017,
        kind='StatefulSet',
        replicas=1,
        description='MongoDB document database',
        folder='databases',
        generate_service=True,
        storage_size='10Gi',
        env_vars=_env(
            MONGO_INITDB_ROOT_USERNAME='root',
            MONGO_INITDB_ROOT_PASSWORD='changeme',
            MONGO_INITDB_DATABASE='appdb'),
    ),
    Preset(
        key='redis',
        type_id='cache',
        image='redis:7-alpine',
        default_port=6379,
        kind='StatefulSet',
        replicas=1,
        description='Redis in-memory cache and broker',
        folder='cache',
        generate_service=True,
        storage_size='2Gi',
    ),
    Preset(
        key='kafka',
        type_id='queue',
        image='confluentinc/cp-kafka:7.6.0',
        default_port=9092,
        kind='StatefulSet',
        replicas=3,
        description='Apache Kafka event streaming',
        folder='messaging',
        generate_config_map=True,
        generate_service=True,
        storage_size='20Gi',
        env_vars=_env(
            KAFKA_ZOOKEEPER_CONNECT='zookeeper:2181',
            KAFKA_OFFSETS_TOPIC_REPLICATION_FACTOR='3',
            KAFKA_MIN_INSYNC_REPLICAS='2'),
    ),
    Preset(
        key='redpanda',
        type_id='queue',
        image='redpandadata/redpanda:v23.3.11',
        default_port=9092,
        kind='StatefulSet',
        replicas=3,
        description='Redpanda, Kafka-compatible without ZooKeeper',
        folder='messaging',
        generate_service=True,
        storage_size='20Gi',
    ),
    Preset(
        key='nginx',
        type_id='gateway',
        image='nginx:1.25-alpine',
        default_port=80,
        kind='Deployment',
        replicas=2,
        description='Nginx web server and reverse proxy',
        folder='ingress',
        generate_config_map=True,
        generate_service=True,
    ),
    Preset(
        key='ingress-nginx',
        type_id='gateway',
        image='registry.k8s.io/ingress-nginx/controller:v1.10.1',
        default_port=80,
        kind='Deployment',
        replicas=1,
        description='Nginx ingress controller exposed through a LoadBalancer',
        folder='ingress',
        generate_service=True,
    ),
    Preset(
        key='grafana',
        type_id='monitoring',
        image='grafana/grafana:10.3.1',
        default_port=3000,
        kind='Deployment',
        replicas=1,
        description='Grafana metrics dashboards',
        folder='monitoring',
        generate_service=True,
        storage_size='5Gi',
        env_vars=_env(GF_SECURITY_ADMIN_PASSWORD='admin', GF_USERS_ALLOW_SIGN_UP='false'),
    ),
    Preset(
        key='prometheus',
        type_id='monitoring',
        image='prom/prometheus:v2.49.1',
        default_port=9090,
        kind='Deployment',
        replicas=1,
        description='Prometheus metrics and alerting',
        folder='monitoring',
        generate_config_map=True,
        generate_service=True,
        storage_size='10Gi',
    ),
    Preset(
        key='custom',
        type_id='service',
        image='',
        default_port=8080,
        kind='Deployment',
        replicas=1,
        description='Custom microservice',
        folder='services',
        generate_service=True,
        env_vars=_env(PORT='8080', NODE_ENV='production'),
    ),
]}

HELM_PRESETS: dict[str, HelmPreset] = { p.key: p for p in [
    HelmPreset(
        key='ingress-nginx',
        type_id='gateway',
        description='Nginx Ingress Controller (official chart)',
        chart_name='ingress-nginx',
        repo='https://kubernetes.github.io/ingress-nginx',
        version='4.10.1',
        default_namespace='infra-ingress-nginx',
        default_values=(
            'ingress-nginx:\n'
            '  namespaceOverride: "infra-ingress-nginx"\n'
            '  controller:\n'
            '    replicaCount: 1\n'
            '    service:\n'
            '      type: LoadBalancer\n'
            '    admissionWebhooks:\n'
            '      enabled: false\n'),
        prod_values=(
            'ingress-nginx:\n'
            '  controller:\n'
            '    replicaCount: 2\n'
            '    admissionWebhooks:\n'
            '      enabled: true\n'),
    ),
    HelmPreset(
        key='redis',
        type_id='cache',
        description='Redis (Bitnami chart)',
        chart_name='redis',
        repo='https://charts.bitnami.com/bitnami',
        version='20.6.3',
        default_namespace='infra-redis',
        default_values=(
            'redis:\n'
            '  architecture: standalone\n'
            '  auth:\n'
            '    enabled: false\n'
            '  master:\n'
            '    persistence:\n'
            '      enabled: false\n'
            '  replica:\n'
            '    replicaCount: 0\n'
            '    persistence:\n'
            '      enabled: false\n'),
        prod_values=(
            'redis:\n'
            '  architecture: replication\n'
            '  auth:\n'
            '    enabled: true\n'
            '    password: "CHANGE_ME"\n'
            '  master:\n'
            '    persistence:\n'
            '      enabled: true\n'
            '      size: 2Gi\n'
            '  replica:\n'
            '    replicaCount: 1\n'
            '    persistence:\n'
            '      enabled: true\n'
            '      size: 2Gi\n'),
    ),
    HelmPreset(
        key='cert-manager',
        type_id='infra',
        description='cert-manager (Jetstack chart)',
        chart_name='cert-manager',
        repo='https://charts.jetstack.io',
        version='1.14.5',
        default_namespace='infra-cert-manager',
        default_values=(
            'cert-manager:\n'
            '  installCRDs: true\n'
            '  replicaCount: 1\n'),
        prod_values=(
            'cert-manager:\n'
            '  replicaCount: 2\n'),
    ),
    HelmPreset(
        key='prometheus',
        type_id='monitoring',
        description='kube-prometheus-stack (Prometheus and Grafana)',
        chart_name='kube-prometheus-stack',
        repo='https://prometheus-community.github.io/helm-charts',
        version='58.2.2',
        default_namespace='infra-monitoring',
        default_values=(
            'kube-prometheus-stack:\n'
            '  grafana:\n'
            '    enabled: true\n'
            '    adminPassword: "admin"\n'
            '  alertmanager:\n'
            '    enabled: false\n'),
        prod_values=(
            'kube-prometheus-stack:\n'
            '  grafana:\n'
            '    adminPassword: "CHANGE_ME"\n'),
    ),
    HelmPreset(
        key='kafka',
        type_id='queue',
        description='Apache Kafka (Bitnami chart)',
        chart_name='kafka',
        repo='https://charts.bitnami.com/bitnami',
        version='31.3.1',
        default_namespace='infra-kafka',
        default_values=(
            'kafka:\n'
            '  replicaCount: 1\n'
            '  persistence:\n'
            '    enabled: false\n'
            '  kraft:\n'
            '    enabled: true\n'
            '  zookeeper:\n'
            '    persistence:\n'
            '      enabled: false\n'),
        prod_values=(
            'kafka:\n'
            '  replicaCount: 3\n'
            '  persistence:\n'
            '    enabled: true\n'
            '    size: 50Gi\n'),
    ),
]}


def get_preset(key: str) -> Preset:
    if key not in FIELD_PRESETS:
        raise KeyError(f"Unknown preset '{key}', expected one of: {', '.join(FIELD_PRESETS)}")
    return FIELD_PRESETS[key]

def get_helm_preset(key: str) -> HelmPreset:
    if key not in HELM_PRESETS:
        raise KeyError(f"Unknown helm preset '{key}', expected one of: {', '.join(HELM_PRESETS)}")
    return HELM_PRESETS[key]
