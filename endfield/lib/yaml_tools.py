import yaml
from typing import Any

def _represent_str(dumper, data):
    """multiline strings are dumped as literal blocks so values files and scripts stay readable"""

    if data.count('\n') > 0:
        return dumper.represent_scalar('tag:yaml.org,2002:str', data, style='|')
    return dumper.represent_scalar('tag:yaml.org,2002:str', data)

yaml.add_representer(str, _represent_str)

def dump_manifest(manifest: dict[str, Any]) -> str:
    # no line wrapping, long scalars stay on one line
    return yaml.dump(manifest, default_flow_style=False, width=float('inf'))

def load_string(s: str) -> Any:
    return yaml.safe_load(s)

def merge_values(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    merges helm values files the way `helm -f a.yaml -f b.yaml` does:
    maps merge recursively, lists and scalars from override replace, and a null
    in override removes the key
    """
    result = dict(base)
    for k, v in override.items():
        if v is None:
            result.pop(k, None)
        elif isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = merge_values(result[k], v)
        else:
            result[k] = v
    return result
