from .models import COMPONENT_LABEL
from .namespace import create_namespace_manifest
from ..models import HelmPreset, GeneratedFileSet
from ..lib.render_template import render_template
from ..lib.yaml_tools import dump_manifest, merge_values, load_string
from typing import Any

RENDERED_PLACEHOLDER = '.gitkeep'

def get_component_dir(release_name: str) -> str:
    return f"infra/{release_name}"

def create_chart_file(release_name: str, helm_preset: HelmPreset) -> str:
    return render_template('Chart.yaml.jinja',
        release_name=release_name,
        chart_name=helm_preset.chart_name,
        chart_version=helm_preset.version,
        repo=helm_preset.repo)

def create_helm_files(release_name: str, helm_preset: HelmPreset) -> GeneratedFileSet:
    base = get_component_dir(release_name)
    namespace = create_namespace_manifest(helm_preset.default_namespace, { COMPONENT_LABEL: release_name })
    return {
        f"{base}/namespace.yaml": dump_manifest(namespace),
        f"{base}/helm/Chart.yaml": create_chart_file(release_name, helm_preset),
        f"{base}/helm/values.yaml": helm_preset.default_values,
        f"{base}/helm/values.prod.yaml": helm_preset.prod_values,
        f"{base}/rendered/{RENDERED_PLACEHOLDER}": "",
    }

def get_effective_values(helm_preset: HelmPreset, prod: bool = False) -> dict[str, Any]:
    """the values helm would see for `-f values.yaml [-f values.prod.yaml]`"""
    values = load_string(helm_preset.default_values) or {}
    if prod:
        values = merge_values(values, load_string(helm_preset.prod_values) or {})
    return values
