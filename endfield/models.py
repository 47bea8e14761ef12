from enum import Enum
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from .errors import PartialDeleteError


class CamelModel(BaseModel):
    """Accepts camelCase keys from the outer tool, keeps snake_case everywhere else."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


WorkloadKind = Literal['Deployment', 'StatefulSet']
FieldSource = Literal['raw', 'helm', 'external']
GeneratedFileSet = dict[str, str]


class EnvVar(CamelModel):
    key: str
    value: str = Field(default='')


class Preset(CamelModel):
    key: str
    type_id: str
    image: str
    default_port: int
    kind: WorkloadKind
    replicas: int = Field(default=1, ge=0)
    description: str = Field(default='')
    folder: str
    generate_config_map: bool = Field(default=False)
    generate_service: bool = Field(default=True)
    storage_size: str | None = None
    env_vars: list[EnvVar] = Field(default_factory=list)


class HelmPreset(CamelModel):
    key: str
    type_id: str
    description: str = Field(default='')
    chart_name: str
    repo: str
    version: str
    default_namespace: str
    default_values: str = Field(default='')
    prod_values: str = Field(default='')


class HelmMeta(CamelModel):
    release_name: str
    namespace: str
    chart_name: str
    chart_version: str
    repo: str
    values_path: str
    rendered_dir: str


class FieldNode(CamelModel):
    id: str
    label: str
    kind: str
    image: str = Field(default='')
    type_id: str = Field(default='service')
    namespace: str
    file_path: str = Field(default='')
    replicas: int | None = None
    source: FieldSource = Field(default='raw')
    helm: HelmMeta | None = None

    @model_validator(mode="after")
    def validate_helm_meta(self):
        if self.source == 'helm' and self.helm is None:
            raise ValueError(f"Helm field '{self.id}' is missing its release metadata")
        return self


class IngressRoute(BaseModel):
    route_id: str
    field_id: str
    target_namespace: str
    target_service: str
    target_port_number: int | None = None
    target_port_name: str | None = None
    host: str | None = None
    path: str = Field(default='/')
    path_type: str = Field(default='Prefix')
    tls_secret: str | None = None
    tls_hosts: list[str] | None = None
    annotations: list[tuple[str, str]] | None = None
    ingress_class_name: str
    ingress_name: str
    ingress_namespace: str

    @model_validator(mode="after")
    def validate_port(self):
        if self.target_port_number is not None and self.target_port_name is not None:
            raise ValueError("A route targets either a port number or a port name, not both")
        return self


class DiscoveredRoute(BaseModel):
    route_id: str
    field_id: str = Field(default='')
    ingress_name: str
    ingress_namespace: str
    host: str | None = None
    path: str = Field(default='/')
    path_type: str = Field(default='Prefix')
    target_service: str
    target_namespace: str
    target_port_number: int | None = None
    target_port_name: str | None = None
    ingress_class_name: str
    tls_secret: str | None = None
    address: str | None = None


class ApplyResult(BaseModel):
    route_id: str
    ingress_name: str
    namespace: str
    stdout: str = Field(default='')
    stderr: str = Field(default='')
    success: bool


class HelmRenderResult(BaseModel):
    rendered_files: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    error: str | None = None


class DeleteResult(BaseModel):
    deleted_files: list[str] = Field(default_factory=list)
    missing_files: list[str] = Field(default_factory=list)
    file_errors: list[str] = Field(default_factory=list)
    kubectl_output: str | None = None
    kubectl_error: str | None = None


class PodInfo(BaseModel):
    name: str
    namespace: str
    phase: str
    ready: int
    total: int
    restarts: int = Field(default=0)


class FieldStatus(BaseModel):
    label: str
    namespace: str
    desired: int
    ready: int
    available: int
    status: str
    pods: list[PodInfo] = Field(default_factory=list)


class ClusterStatus(BaseModel):
    workloads: list[FieldStatus] = Field(default_factory=list)
    kubectl_available: bool = Field(default=True)
    error: str | None = None


class DeleteMode(Enum):
    FULL = "full"
    CLUSTER_ONLY = "cluster_only"
    VIEW_ONLY = "view_only"


class DeleteReport(BaseModel):
    mode: DeleteMode
    field_id: str
    disk: DeleteResult | None = None
    cluster_output: str | None = None
    cluster_error: str | None = None
    removed_from_view: bool = Field(default=False)

    @property
    def disk_ok(self) -> bool:
        return self.disk is None or len(self.disk.file_errors) == 0

    @property
    def cluster_ok(self) -> bool:
        return self.cluster_error is None

    @property
    def partial_error(self) -> PartialDeleteError | None:
        """Set when the disk half succeeded but the best-effort cluster half did not."""
        if self.mode == DeleteMode.FULL and self.disk is not None and self.disk_ok and self.cluster_error is not None:
            return PartialDeleteError(self.disk.deleted_files, self.cluster_error)
        return None


class ScanResult(BaseModel):
    nodes: list[FieldNode] = Field(default_factory=list)
    project_path: str
    errors: list[str] = Field(default_factory=list)


class Edge(BaseModel):
    route: IngressRoute
    source: FieldNode
    target: FieldNode
    label: str
