"""
Permissive tag scanner for Ingress manifests written by this tool.

This is deliberately not a YAML parser. A manifest belongs to us iff it carries
both the route id and field id tags; anything else (foreign Ingresses, other
kinds, unreadable text) yields None rather than an exception. Field values are
picked out line by line, which tolerates both block sequence styles
(`- host:` indented under `rules:` or flush with it) and quoted scalars.
Annotation values may span lines, either as `|` literal blocks or wrapped.
"""
import re, logging
from ..models import IngressRoute
from ..create_manifests.models import ROUTE_ID_KEY, FIELD_ID_KEY, IDENTITY_KEYS

logger = logging.getLogger(__name__)

_ESCAPES = { 'n': '\n', 't': '\t', '"': '"', '\\': '\\', '/': '/' }

def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) < 2 or value[0] != value[-1] or value[0] not in ('"', "'"):
        return value
    if value[0] == "'":
        return value[1:-1].replace("''", "'")
    return re.sub(r'\\(.)', lambda m: _ESCAPES.get(m.group(1), m.group(0)), value[1:-1])

def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(' '))

def _key_column(line: str) -> int:
    return len(line) - len(line.lstrip(' -'))

def _find(pattern: str, text: str) -> str | None:
    m = re.search(pattern, text, re.MULTILINE)
    if m is None:
        return None
    value = _unquote(m.group(1))
    return value or None

def _block(lines: list[str], start: int) -> list[str]:
    """lines nested under the key at lines[start], including flush sequence items"""
    column = _key_column(lines[start])
    result = []
    for line in lines[start + 1:]:
        if line.strip() == '':
            continue
        indent = _indent(line)
        if indent > column or (indent == column and line.lstrip().startswith('- ')):
            result.append(line)
        else:
            break
    return result

def _find_key(lines: list[str], key: str) -> int | None:
    for i, line in enumerate(lines):
        if line.strip().lstrip('- ').rstrip() == f"{key}:":
            return i
    return None

def _scalar(lines: list[str], key: str) -> str | None:
    """the first `key: value` among the shallowest lines of a block"""
    if len(lines) == 0:
        return None
    column = min(_key_column(l) for l in lines)
    for line in lines:
        if _key_column(line) != column:
            continue
        m = re.match(rf"""^[ -]*["']?{re.escape(key)}["']?:[ \t]*(\S.*)$""", line)
        if m:
            return _unquote(m.group(1))
    return None

def _get_tag(lines: list[str], key: str) -> str | None:
    """identity is read from labels, then from annotations for hand-written files"""
    for block_key in ('labels', 'annotations'):
        idx = _find_key(lines, block_key)
        if idx is None:
            continue
        value = _scalar(_block(lines, idx), key)
        if value:
            return value
    return None

def _parse_backend(lines: list[str]) -> tuple[str, int | None, str | None]:
    service_idx = _find_key(lines, 'service')
    if service_idx is None:
        return '', None, None
    service = _block(lines, service_idx)
    name = _scalar(service, 'name') or ''

    port_idx = _find_key(service, 'port')
    if port_idx is None:
        return name, None, None
    port = _block(service, port_idx)
    number = _scalar(port, 'number')
    if number is not None:
        return name, int(number), None
    return name, None, _scalar(port, 'name')

def _parse_tls_hosts(lines: list[str]) -> list[str] | None:
    hosts_idx = _find_key(lines, 'hosts')
    if hosts_idx is None:
        return None
    hosts = [_unquote(l.strip()[2:]) for l in _block(lines, hosts_idx) if l.lstrip().startswith('- ')]
    return hosts or None

def _literal(lines: list[str], header: str) -> str:
    """body of a `|` block scalar, chomped per its header (`|`, `|-` or `|+`)"""
    content = [l for l in lines if l.strip()]
    indent = min(_indent(l) for l in content) if content else 0
    text = '\n'.join(l[indent:] for l in lines)
    if '-' in header:
        return text.rstrip('\n')
    if '+' in header:
        return text + '\n'
    return text.rstrip('\n') + '\n'

def _annotation_value(value: str, continuation: list[str]) -> str:
    if value.startswith('|'):
        return _literal(continuation, value)
    if len(continuation) == 0:
        return _unquote(value)
    # a wrapped scalar folds its line breaks into spaces
    parts = [value] + [l.strip() for l in continuation if l.strip()]
    return _unquote(' '.join(parts))

def _parse_annotations(lines: list[str]) -> list[tuple[str, str]] | None:
    annotations_idx = _find_key(lines, 'annotations')
    if annotations_idx is None:
        return None
    column = _indent(lines[annotations_idx])

    entries: list[tuple[str, str, list[str]]] = []
    key_column = None
    for line in lines[annotations_idx + 1:]:
        if line.strip() == '':
            if entries:
                entries[-1][2].append('')
            continue
        indent = _indent(line)
        if indent <= column:
            break
        if key_column is None:
            key_column = indent
        if indent > key_column:
            if entries:
                entries[-1][2].append(line)
            continue
        m = re.match(r"""^\s*("[^"]*"|'[^']*'|[^\s:][^:]*?):(?:[ \t]+(.*))?$""", line)
        if m is None:
            continue
        entries.append((_unquote(m.group(1)), (m.group(2) or '').strip(), []))

    result = []
    for key, value, continuation in entries:
        if key in IDENTITY_KEYS:
            continue
        # trailing blank lines only belong to a `|+` block
        while continuation and continuation[-1] == '' and not value.startswith('|+'):
            continuation.pop()
        result.append((key, _annotation_value(value, continuation)))
    return result or None

def parse_ingress_route(text: str, file_path: str) -> IngressRoute | None:
    lines = text.splitlines()
    route_id = _get_tag(lines, ROUTE_ID_KEY)
    field_id = _get_tag(lines, FIELD_ID_KEY)
    if not route_id or not field_id:
        return None

    try:
        spec_idx = _find_key(lines, 'spec')
        spec = _block(lines, spec_idx) if spec_idx is not None else []
        spec_text = '\n'.join(spec)
        ingress_name = _find(r"^  name:[ \t]*(\S.*)$", text) or ''
        ingress_namespace = _find(r"^  namespace:[ \t]*(\S.*)$", text) or ''
        target_service, port_number, port_name = _parse_backend(spec)

        return IngressRoute(
            route_id=route_id,
            field_id=field_id,
            ingress_name=ingress_name,
            ingress_namespace=ingress_namespace,
            # an Ingress can only reach services in its own namespace
            target_namespace=ingress_namespace,
            target_service=target_service,
            target_port_number=port_number,
            target_port_name=port_name,
            host=_find(r"^[ -]*host:[ \t]*(\S.*)$", spec_text),
            path=_find(r"^[ -]*path:[ \t]*(\S.*)$", spec_text) or '/',
            path_type=_find(r"^[ -]*pathType:[ \t]*(\S.*)$", spec_text) or 'Prefix',
            tls_secret=_find(r"^[ -]*secretName:[ \t]*(\S.*)$", spec_text),
            tls_hosts=_parse_tls_hosts(spec),
            annotations=_parse_annotations(lines),
            ingress_class_name=_find(r"^[ -]*ingressClassName:[ \t]*(\S.*)$", spec_text) or '',
        )
    except ValueError as e:
        logger.warning(f"Could not parse ingress route in {file_path}: {e}")
        return None
