from .models import ManifestArguments
from ..models import EnvVar
from ..utils import is_secret_key
from typing import Any
from dotenv import dotenv_values
from kubernetes import client

PGDATA_KEY = 'PGDATA'
PGDATA_VALUE = '/var/lib/postgresql/data/pgdata'

def get_secret_name(args: ManifestArguments) -> str:
    return f"{args.name}-secret"

def get_config_map_name(args: ManifestArguments) -> str:
    return f"{args.name}-config"

def partition_env_vars(env_vars: list[EnvVar]) -> tuple[list[EnvVar], list[EnvVar]]:
    """returns (sensitive, plain)"""
    sensitive = [e for e in env_vars if is_secret_key(e.key)]
    plain = [e for e in env_vars if not is_secret_key(e.key)]
    return sensitive, plain

def load_env_file(path: str) -> dict[str, str]:
    values = dotenv_values(path)
    return { k: v or "" for k, v in values.items() }

def create_secret_manifest(args: ManifestArguments, sensitive: list[EnvVar]) -> dict[str, Any]:
    secret = client.V1Secret(
        api_version="v1",
        kind="Secret",
        type="Opaque",
        metadata=client.V1ObjectMeta(
            name=get_secret_name(args),
            namespace=args.namespace,
            labels=args.labels,
        ),
        string_data={ e.key: e.value for e in sensitive }
    )
    return client.ApiClient().sanitize_for_serialization(secret)

def create_config_map_manifest(args: ManifestArguments, plain: list[EnvVar]) -> dict[str, Any]:
    config_map = client.V1ConfigMap(
        api_version="v1",
        kind="ConfigMap",
        metadata=client.V1ObjectMeta(
            name=get_config_map_name(args),
            namespace=args.namespace,
            labels=args.labels,
        ),
        data={ e.key: e.value for e in plain }
    )
    return client.ApiClient().sanitize_for_serialization(config_map)

def create_container_env(args: ManifestArguments) -> list[client.V1EnvVar] | None:
    sensitive, plain = partition_env_vars(args.env_vars)
    config_map_keys = { e.key for e in plain } if args.preset.generate_config_map else set()

    all_vars = list(args.env_vars)
    if args.preset.key == 'postgres' and not any(e.key == PGDATA_KEY for e in all_vars):
        all_vars.append(EnvVar(key=PGDATA_KEY, value=PGDATA_VALUE))
    if len(all_vars) == 0:
        return None

    env = []
    for e in all_vars:
        # a key is sourced from exactly one place: secret, then config map, then inline
        if is_secret_key(e.key) and len(sensitive) > 0:
            env.append(client.V1EnvVar(
                name=e.key,
                value_from=client.V1EnvVarSource(
                    secret_key_ref=client.V1SecretKeySelector(name=get_secret_name(args), key=e.key)
                )
            ))
        elif e.key in config_map_keys:
            env.append(client.V1EnvVar(
                name=e.key,
                value_from=client.V1EnvVarSource(
                    config_map_key_ref=client.V1ConfigMapKeySelector(name=get_config_map_name(args), key=e.key)
                )
            ))
        else:
            env.append(client.V1EnvVar(name=e.key, value=e.value))
    return env
