from .models import ManifestArguments, DATA_VOLUME_NAME
from typing import Any
from kubernetes import client

def get_claim_name(args: ManifestArguments) -> str:
    return f"{args.name}-{DATA_VOLUME_NAME}"

def create_data_volume_mount(args: ManifestArguments) -> client.V1VolumeMount:
    key = args.preset.key
    if key == 'postgres':
        return client.V1VolumeMount(name=DATA_VOLUME_NAME, mount_path='/var/lib/postgresql/data', sub_path='pgdata')
    if key == 'mongodb':
        return client.V1VolumeMount(name=DATA_VOLUME_NAME, mount_path='/data/db')
    return client.V1VolumeMount(name=DATA_VOLUME_NAME, mount_path='/data')

def _create_claim_spec(storage_size: str) -> client.V1PersistentVolumeClaimSpec:
    return client.V1PersistentVolumeClaimSpec(
        access_modes=["ReadWriteOnce"],
        resources=client.V1VolumeResourceRequirements(
            requests={ "storage": storage_size }
        )
    )

def create_volume_claim_template(args: ManifestArguments) -> client.V1PersistentVolumeClaim:
    assert args.preset.storage_size is not None
    return client.V1PersistentVolumeClaim(
        metadata=client.V1ObjectMeta(name=DATA_VOLUME_NAME),
        spec=_create_claim_spec(args.preset.storage_size),
    )

def create_pvc_manifest(args: ManifestArguments) -> tuple[dict[str, Any], client.V1Volume]:
    """ returns the standalone claim and the pod volume that references it"""
    assert args.preset.storage_size is not None
    pvc = client.V1PersistentVolumeClaim(
        api_version="v1",
        kind="PersistentVolumeClaim",
        metadata=client.V1ObjectMeta(
            name=get_claim_name(args),
            namespace=args.namespace,
            labels=args.labels,
        ),
        spec=_create_claim_spec(args.preset.storage_size),
    )
    volume = client.V1Volume(
        name=DATA_VOLUME_NAME,
        persistent_volume_claim=client.V1PersistentVolumeClaimVolumeSource(
            claim_name=get_claim_name(args)
        )
    )
    return client.ApiClient().sanitize_for_serialization(pvc), volume
