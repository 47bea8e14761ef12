from .models import ManifestArguments
from ..models import Preset, HelmPreset, EnvVar, GeneratedFileSet
from ..utils import sanitize_name
from ..lib.yaml_tools import dump_manifest
from .namespace import create_namespace_manifest
from .environment import partition_env_vars, create_secret_manifest, create_config_map_manifest
from .volume import create_pvc_manifest
from .service import create_headless_service_manifest, create_service_manifest
from .workload import create_statefulset_manifest, create_deployment_manifest
from .helm import create_helm_files
from .ingress import create_ingress_manifest, get_ingress_route_yaml
from .rendered import split_rendered_manifests


def synthesize_raw(name: str, preset: Preset, namespace: str, port: int, env_vars: list[EnvVar]) -> GeneratedFileSet:
    """
    Builds the raw manifest set for one component.
    Keys are paths relative to the project root, in the order they should be applied.
    """
    args = ManifestArguments(
        name=sanitize_name(name),
        preset=preset,
        namespace=namespace,
        port=port,
        env_vars=list(env_vars),
    )
    files: GeneratedFileSet = {}
    files['namespace.yaml'] = dump_manifest(create_namespace_manifest(namespace))

    sensitive, plain = partition_env_vars(args.env_vars)
    if len(sensitive) > 0:
        files[args.file_path('secret')] = dump_manifest(create_secret_manifest(args, sensitive))
    if preset.generate_config_map and len(plain) > 0:
        files[args.file_path('configmap')] = dump_manifest(create_config_map_manifest(args, plain))

    if preset.kind == 'StatefulSet':
        files[args.file_path('headless-svc')] = dump_manifest(create_headless_service_manifest(args))
        files[args.file_path('statefulset')] = dump_manifest(create_statefulset_manifest(args))
    else:
        volumes = []
        if preset.storage_size:
            pvc, volume = create_pvc_manifest(args)
            files[args.file_path('pvc')] = dump_manifest(pvc)
            volumes.append(volume)
        files[args.file_path('deployment')] = dump_manifest(create_deployment_manifest(args, volumes))

    if preset.generate_service:
        files[args.file_path('service')] = dump_manifest(create_service_manifest(args))

    return files


def synthesize_helm(release_name: str, helm_preset: HelmPreset) -> GeneratedFileSet:
    return create_helm_files(release_name, helm_preset)
