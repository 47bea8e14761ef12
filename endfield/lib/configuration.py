import os

def parse_bool_env_var(var_name, default=False):
    value = os.getenv(var_name)
    if value is not None:
        value_str = str(value).lower()
        return value_str in ('true', '1') or \
               (value_str.isdigit() and int(value_str) != 0)
    return default

def parse_float_env_var(var_name, default: float) -> float:
    value = os.getenv(var_name)
    if value is None or value.strip() == '':
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise ValueError(f"Environment variable {var_name} must be a number, got '{value}'")
    if parsed <= 0:
        raise ValueError(f"Environment variable {var_name} must be positive, got '{value}'")
    return parsed

def get_str_env_var(var_name, default: str) -> str:
    value = os.getenv(var_name)
    if value is None or value.strip() == '':
        return default
    return value.strip()


DEBUG = parse_bool_env_var('DEBUG')
POLL_INTERVAL_SECONDS = parse_float_env_var('ENDFIELD_POLL_INTERVAL', 5.0)
DEFAULT_NAMESPACE = get_str_env_var('ENDFIELD_DEFAULT_NAMESPACE', 'apps')
DEFAULT_INGRESS_CLASS = get_str_env_var('ENDFIELD_INGRESS_CLASS', 'nginx')
