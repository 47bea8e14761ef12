from .models import ManifestArguments, MAIN_PORT_NAME
from .environment import create_container_env
from .probes import create_probes
from .resources import create_resource_requirements
from .volume import create_data_volume_mount, create_volume_claim_template
from .service import get_headless_service_name
from typing import Any
from kubernetes import client

def create_container(args: ManifestArguments) -> client.V1Container:
    liveness, readiness = create_probes(args)
    container = client.V1Container(
        name=args.name,
        image=args.preset.image,
        ports=[client.V1ContainerPort(
            container_port=args.port,
            name=MAIN_PORT_NAME if args.preset.kind == 'StatefulSet' else None,
        )],
        env=create_container_env(args),
        liveness_probe=liveness,
        readiness_probe=readiness,
        resources=create_resource_requirements(args.preset.key),
    )
    if args.preset.storage_size:
        container.volume_mounts = [create_data_volume_mount(args)]
    return container

def create_statefulset_manifest(args: ManifestArguments) -> dict[str, Any]:
    pod_template = client.V1PodTemplateSpec(
        metadata=client.V1ObjectMeta(labels=args.selector),
        spec=client.V1PodSpec(
            termination_grace_period_seconds=30,
            security_context=client.V1PodSecurityContext(fs_group=999),
            containers=[create_container(args)],
        ),
    )

    statefulset_spec = client.V1StatefulSetSpec(
        service_name=get_headless_service_name(args),
        replicas=args.preset.replicas,
        update_strategy=client.V1StatefulSetUpdateStrategy(type='RollingUpdate'),
        selector=client.V1LabelSelector(match_labels=args.selector),
        template=pod_template,
    )
    if args.preset.storage_size:
        statefulset_spec.volume_claim_templates = [create_volume_claim_template(args)]

    statefulset = client.V1StatefulSet(
        api_version='apps/v1',
        kind='StatefulSet',
        metadata=client.V1ObjectMeta(
            name=args.name,
            namespace=args.namespace,
            labels=args.labels,
        ),
        spec=statefulset_spec,
    )
    return client.ApiClient().sanitize_for_serialization(statefulset)

def create_deployment_manifest(args: ManifestArguments, volumes: list[client.V1Volume] | None = None) -> dict[str, Any]:
    pod_template = client.V1PodTemplateSpec(
        metadata=client.V1ObjectMeta(labels=args.selector),
        spec=client.V1PodSpec(
            containers=[create_container(args)],
            volumes=volumes or None,
        ),
    )

    deployment_spec = client.V1DeploymentSpec(
        replicas=args.preset.replicas,
        selector=client.V1LabelSelector(match_labels=args.selector),
        template=pod_template,
        strategy=client.V1DeploymentStrategy(
            type='RollingUpdate',
            rolling_update=client.V1RollingUpdateDeployment(max_surge=1, max_unavailable=0),
        )
    )

    deployment = client.V1Deployment(
        api_version='apps/v1',
        kind='Deployment',
        metadata=client.V1ObjectMeta(
            name=args.name,
            namespace=args.namespace,
            labels=args.labels,
        ),
        spec=deployment_spec,
    )
    return client.ApiClient().sanitize_for_serialization(deployment)
