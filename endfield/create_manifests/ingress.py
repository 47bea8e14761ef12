from .models import INGRESS_MANAGED_BY_LABEL, MANAGED_BY_VALUE, ROUTE_ID_KEY, FIELD_ID_KEY, IDENTITY_KEYS, DEFAULT_BACKEND_PORT
from ..models import IngressRoute
from ..lib.yaml_tools import dump_manifest
from typing import Any
from kubernetes import client

def get_route_labels(route: IngressRoute) -> dict[str, str]:
    return {
        INGRESS_MANAGED_BY_LABEL: MANAGED_BY_VALUE,
        FIELD_ID_KEY: route.field_id,
        ROUTE_ID_KEY: route.route_id,
    }

def create_backend_port(route: IngressRoute) -> client.V1ServiceBackendPort:
    if route.target_port_number is not None:
        return client.V1ServiceBackendPort(number=route.target_port_number)
    if route.target_port_name is not None:
        return client.V1ServiceBackendPort(name=route.target_port_name)
    return client.V1ServiceBackendPort(number=DEFAULT_BACKEND_PORT)

def create_ingress_manifest(route: IngressRoute) -> dict[str, Any]:
    annotations = get_route_labels(route)
    for k, v in route.annotations or []:
        if k in IDENTITY_KEYS:
            continue
        annotations[k] = v

    ingress = client.V1Ingress(
        api_version="networking.k8s.io/v1",
        kind="Ingress",
        metadata=client.V1ObjectMeta(
            name=route.ingress_name,
            namespace=route.ingress_namespace,
            labels=get_route_labels(route),
            annotations=annotations,
        ),
        spec=client.V1IngressSpec(
            ingress_class_name=route.ingress_class_name,
            rules=[client.V1IngressRule(
                host=route.host,
                http=client.V1HTTPIngressRuleValue(
                    paths=[client.V1HTTPIngressPath(
                        path=route.path,
                        path_type=route.path_type,
                        backend=client.V1IngressBackend(
                            service=client.V1IngressServiceBackend(
                                name=route.target_service,
                                port=create_backend_port(route),
                            )
                        )
                    )]
                )
            )]
        )
    )

    if route.tls_secret and route.tls_hosts:
        # make the compiler happy
        assert ingress.spec is not None
        ingress.spec.tls = [client.V1IngressTLS(hosts=route.tls_hosts, secret_name=route.tls_secret)]

    return client.ApiClient().sanitize_for_serialization(ingress)

def get_ingress_route_yaml(route: IngressRoute) -> str:
    return dump_manifest(create_ingress_manifest(route))
