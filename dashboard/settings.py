"""
Dashboard settings.
Loads field aliases and the refresh interval from config/dashboard.yaml when present,
with environment-variable overrides and built-in defaults.
"""
import importlib.util
import logging
import os
from typing import Any, Dict, List, Optional

from normalize.fields import merge_aliases

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = 'dashboard.yaml'
DEFAULT_REFRESH_INTERVAL = 60.0

# environment overrides
ENV_REFRESH_INTERVAL = 'DASHBOARD_REFRESH_INTERVAL'
ENV_CONFIG_PATH = 'DASHBOARD_CONFIG'


class Settings:
    """
    Resolved runtime settings.
    """
    def __init__(self, field_aliases: Dict[str, List[str]], refresh_interval: float = DEFAULT_REFRESH_INTERVAL, source: Optional[str] = None):
        self.field_aliases = field_aliases
        self.refresh_interval = refresh_interval
        self.source = source  # path the settings were read from, None for defaults

    def __repr__(self):
        return f"Settings(refresh_interval={self.refresh_interval}, source={self.source!r})"


def default_settings_path() -> str:
    return os.path.join(os.path.dirname(os.path.dirname(__file__)), 'config', SETTINGS_FILENAME)


def _read_yaml(path: str) -> Dict[str, Any]:
    """Return the parsed YAML mapping or an empty dict when unreadable."""
    if importlib.util.find_spec('yaml') is None:
        logger.warning("PyYAML not installed; ignoring %s", path)
        return {}
    import yaml
    try:
        with open(path, 'r', encoding='utf-8') as f:
            doc = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as ex:
        logger.warning("Failed to load settings from %s: %s", path, ex)
        return {}
    return doc if isinstance(doc, dict) else {}


def _positive_float(value: Any, fallback: float) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return fallback
    return result if result > 0 else fallback


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Build Settings from YAML (if available) and the environment.

    Precedence: environment over file over defaults. A missing or broken file
    yields the defaults.
    """
    path = path or os.getenv(ENV_CONFIG_PATH) or default_settings_path()
    doc: Dict[str, Any] = {}
    source = None
    if os.path.exists(path):
        doc = _read_yaml(path)
        source = path if doc else None

    aliases = doc.get('field_aliases') if isinstance(doc.get('field_aliases'), dict) else None
    interval = _positive_float(doc.get('refresh_interval', DEFAULT_REFRESH_INTERVAL), DEFAULT_REFRESH_INTERVAL)
    env_interval = os.getenv(ENV_REFRESH_INTERVAL)
    if env_interval:
        interval = _positive_float(env_interval, interval)

    return Settings(field_aliases=merge_aliases(aliases), refresh_interval=interval, source=source)
