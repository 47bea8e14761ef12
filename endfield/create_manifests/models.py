from dataclasses import dataclass, field
from ..models import Preset, EnvVar

APP_SELECTOR_NAME = 'app'
MANAGED_BY_LABEL = 'managed-by'
MANAGED_BY_VALUE = 'endfield'
COMPONENT_LABEL = 'endfield-component'
INGRESS_MANAGED_BY_LABEL = 'app.kubernetes.io/managed-by'
ROUTE_ID_KEY = 'endfield.io/routeId'
FIELD_ID_KEY = 'endfield.io/fieldId'
# written as both labels and annotations, never taken from user annotations
IDENTITY_KEYS = (INGRESS_MANAGED_BY_LABEL, ROUTE_ID_KEY, FIELD_ID_KEY)
MAIN_PORT_NAME = 'main'
DATA_VOLUME_NAME = 'data'
DEFAULT_BACKEND_PORT = 80

@dataclass
class ManifestArguments:
    name: str
    preset: Preset
    namespace: str
    port: int
    env_vars: list[EnvVar]
    labels: dict[str, str] = field(init=False)

    def __post_init__(self):
        self.labels = { APP_SELECTOR_NAME: self.name, MANAGED_BY_LABEL: MANAGED_BY_VALUE }

    @property
    def selector(self) -> dict[str, str]:
        return { APP_SELECTOR_NAME: self.name }

    def file_path(self, suffix: str) -> str:
        return f"{self.preset.folder}/{self.name}-{suffix}.yaml"
