from .models import ManifestArguments, MAIN_PORT_NAME
from typing import Any
from kubernetes import client

LOAD_BALANCER_PRESETS = ('ingress-nginx',)

def get_headless_service_name(args: ManifestArguments) -> str:
    return f"{args.name}-headless"

def _main_port(args: ManifestArguments, protocol: str | None = None) -> client.V1ServicePort:
    return client.V1ServicePort(
        name=MAIN_PORT_NAME,
        port=args.port,
        target_port=args.port,
        protocol=protocol,
    )

def create_headless_service_manifest(args: ManifestArguments) -> dict[str, Any]:
    service = client.V1Service(
        api_version="v1",
        kind="Service",
        metadata=client.V1ObjectMeta(
            name=get_headless_service_name(args),
            namespace=args.namespace,
            labels=args.labels,
        ),
        spec=client.V1ServiceSpec(
            cluster_ip='None',
            selector=args.selector,
            ports=[_main_port(args)],
        )
    )
    return client.ApiClient().sanitize_for_serialization(service)

def create_service_manifest(args: ManifestArguments) -> dict[str, Any]:
    service_type = 'LoadBalancer' if args.preset.key in LOAD_BALANCER_PRESETS else 'ClusterIP'
    service = client.V1Service(
        api_version="v1",
        kind="Service",
        metadata=client.V1ObjectMeta(
            name=args.name,
            namespace=args.namespace,
            labels=args.labels,
        ),
        spec=client.V1ServiceSpec(
            type=service_type,
            selector=args.selector,
            ports=[_main_port(args, 'TCP')],
        )
    )
    return client.ApiClient().sanitize_for_serialization(service)
