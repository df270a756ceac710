"""Environment variable expansion for configuration values."""
import os
import re
from typing import Any

# ${VAR:default} - the default applies when VAR is unset
_DEFAULT_PATTERN = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*):([^}]*)\}')


def expand_env_vars(value: Any) -> Any:
    """
    Expand environment variables in strings, recursing into dicts and lists.

    ``$VAR`` and ``${VAR}`` follow ``os.path.expandvars``: unknown variables
    are left untouched. ``${VAR:default}`` falls back to ``default``.
    Non-string scalars are returned unchanged.
    """
    if isinstance(value, str):
        value = _DEFAULT_PATTERN.sub(lambda m: os.environ.get(m.group(1), m.group(2)), value)
        return os.path.expandvars(value)
    if isinstance(value, dict):
        return {key: expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value
