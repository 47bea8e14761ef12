import argparse, asyncio, inspect, logging, sys
from .catalog import FIELD_PRESETS, HELM_PRESETS, get_preset, get_helm_preset
from .commands import ProjectFiles, OfflineClusterCommands
from .create_manifests import synthesize_raw, synthesize_helm, get_ingress_route_yaml
from .create_manifests.environment import load_env_file
from .create_manifests.helm import get_effective_values
from .lib.configuration import DEBUG, DEFAULT_NAMESPACE, DEFAULT_INGRESS_CLASS
from .lib.yaml_tools import dump_manifest
from .routes import RouteRegistry, new_route, resolve_edges, route_edge_label
from .scan import scan_project
from .state import ProjectState
from .utils import merge_env_vars
from .workflows import Workflows

def _print_files(files: dict[str, str]):
    for rel_path, content in files.items():
        print(f"# {rel_path}")
        print('---')
        print(content, end='' if content.endswith('\n') else '\n')

def _parse_annotation(s: str) -> tuple[str, str]:
    if '=' not in s:
        raise argparse.ArgumentTypeError(f"annotation must be KEY=VALUE, got '{s}'")
    k, v = s.split('=', 1)
    return k.strip(), v.strip()

def cmd_presets(args):
    print('raw presets:')
    for key, preset in FIELD_PRESETS.items():
        print(f"  {key:<16}{preset.kind:<13}{preset.image:<50}{preset.description}")
    print('helm presets:')
    for key, preset in HELM_PRESETS.items():
        print(f"  {key:<16}{preset.chart_name}@{preset.version:<20}{preset.description}")

async def cmd_synth_raw(args):
    preset = get_preset(args.preset)
    env_vars = preset.env_vars
    if args.env_file:
        env_vars = merge_env_vars(env_vars, load_env_file(args.env_file))

    if args.out is None:
        _print_files(synthesize_raw(args.name, preset, args.namespace, args.port or preset.default_port, env_vars))
        return

    state = ProjectState(project_path=args.out)
    workflows = Workflows(state, ProjectFiles(), OfflineClusterCommands())
    creation = await workflows.create_raw_field(args.name, preset, args.namespace, args.port, env_vars)
    for path in creation.saved_files:
        print(path)

async def cmd_synth_helm(args):
    helm_preset = get_helm_preset(args.preset)
    if args.values:
        print(dump_manifest(get_effective_values(helm_preset, prod=args.values == 'prod')), end='')
        return

    if args.out is None:
        _print_files(synthesize_helm(args.release, helm_preset))
        return

    state = ProjectState(project_path=args.out)
    workflows = Workflows(state, ProjectFiles(), OfflineClusterCommands())
    creation = await workflows.create_helm_field(args.release, helm_preset)
    for path in creation.saved_files:
        print(path)

async def cmd_routes_list(args):
    state = ProjectState(project_path=args.project, nodes=scan_project(args.project).nodes)
    registry = RouteRegistry(state, ProjectFiles(), OfflineClusterCommands())
    routes = await registry.load_routes()
    await registry.wait_for_enrichment()
    if len(routes) == 0:
        print('no routes found')
        return
    for route in routes:
        print(f"{route.route_id:<18}{route.ingress_namespace}/{route.ingress_name:<20}{route_edge_label(route)}")

async def cmd_routes_yaml(args):
    route = new_route(
        field_id=args.field_id,
        target_namespace=args.namespace,
        target_service=args.service,
        target_port_number=args.port,
        target_port_name=args.port_name,
        host=args.host,
        path=args.path,
        path_type=args.path_type,
        tls_secret=args.tls_secret,
        tls_hosts=args.tls_host,
        annotations=args.annotation,
        ingress_class_name=args.ingress_class,
        ingress_namespace=args.ingress_namespace,
    )
    if args.project is None:
        print(get_ingress_route_yaml(route), end='')
        return

    state = ProjectState(project_path=args.project, nodes=scan_project(args.project).nodes)
    registry = RouteRegistry(state, ProjectFiles(), OfflineClusterCommands())
    print(await registry.save_route(route))

async def cmd_scan(args):
    result = scan_project(args.project)
    for error in result.errors:
        print(f"error: {error}", file=sys.stderr)

    state = ProjectState(project_path=args.project, nodes=result.nodes)
    registry = RouteRegistry(state, ProjectFiles(), OfflineClusterCommands())
    await registry.load_routes()
    await registry.wait_for_enrichment()

    for node in state.nodes:
        print(f"{node.id:<40}{node.kind:<13}{node.namespace:<16}{node.image}")
    for edge in resolve_edges(state):
        print(f"{edge.source.label} -> {edge.target.label}: {edge.label}")

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='endfield')
    subparsers = parser.add_subparsers(dest='command', required=True)

    presets = subparsers.add_parser('presets', help='list the built-in presets')
    presets.set_defaults(func=cmd_presets)

    synth = subparsers.add_parser('synth', help='generate manifests for a new field')
    synth_sub = synth.add_subparsers(dest='synth_command', required=True)

    raw = synth_sub.add_parser('raw', help='plain kubernetes manifests from a preset')
    raw.add_argument('preset', help='preset key, see `endfield presets`')
    raw.add_argument('name', help='component name')
    raw.add_argument('--namespace', default=DEFAULT_NAMESPACE)
    raw.add_argument('--port', type=int, default=None, help='defaults to the preset port')
    raw.add_argument('--env-file', default=None, help='dotenv file merged over the preset env vars')
    raw.add_argument('--out', default=None, help='project directory to write into, prints to stdout if omitted')
    raw.set_defaults(func=cmd_synth_raw)

    helm = synth_sub.add_parser('helm', help='wrapper chart for a helm preset')
    helm.add_argument('preset', help='helm preset key, see `endfield presets`')
    helm.add_argument('release', help='release name')
    helm.add_argument('--out', default=None, help='project directory to write into, prints to stdout if omitted')
    helm.add_argument('--values', choices=['default', 'prod'], default=None, help='print the effective values instead')
    helm.set_defaults(func=cmd_synth_helm)

    routes = subparsers.add_parser('routes', help='ingress routes')
    routes_sub = routes.add_subparsers(dest='routes_command', required=True)

    routes_list = routes_sub.add_parser('list', help='list the routes of a project')
    routes_list.add_argument('project', help='project directory')
    routes_list.set_defaults(func=cmd_routes_list)

    routes_yaml = routes_sub.add_parser('yaml', help='create a new route')
    routes_yaml.add_argument('field_id', help='id of the ingress field that owns the route')
    routes_yaml.add_argument('namespace', help='namespace of the target service')
    routes_yaml.add_argument('service', help='target service')
    port = routes_yaml.add_mutually_exclusive_group()
    port.add_argument('--port', type=int, default=None)
    port.add_argument('--port-name', default=None)
    routes_yaml.add_argument('--host', default=None)
    routes_yaml.add_argument('--path', default='/')
    routes_yaml.add_argument('--path-type', default='Prefix', choices=['Prefix', 'Exact', 'ImplementationSpecific'])
    routes_yaml.add_argument('--tls-secret', default=None)
    routes_yaml.add_argument('--tls-host', action='append', default=None)
    routes_yaml.add_argument('--annotation', action='append', type=_parse_annotation, default=None, help='KEY=VALUE')
    routes_yaml.add_argument('--ingress-class', default=DEFAULT_INGRESS_CLASS)
    routes_yaml.add_argument('--ingress-namespace', default=None, help='defaults to the target namespace')
    routes_yaml.add_argument('--project', default=None, help='save the route file into this project')
    routes_yaml.set_defaults(func=cmd_routes_yaml)

    scan = subparsers.add_parser('scan', help='list the fields and edges of a project')
    scan.add_argument('project', help='project directory')
    scan.set_defaults(func=cmd_scan)

    return parser

def run(argv: list[str] | None = None):
    args = build_parser().parse_args(argv)
    if inspect.iscoroutinefunction(args.func):
        asyncio.run(args.func(args))
    else:
        args.func(args)

def _configure_logging():
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

def main():
    _configure_logging()
    if DEBUG:
        run()
    else:
        try:
            run()
        # discard stack trace
        except Exception as e:
            print(f"{type(e).__name__}:", e, file=sys.stderr)
            exit(1)


if __name__ == '__main__':
    main()
