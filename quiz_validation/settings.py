"""
Settings loader for settings.yaml

Usage:
    from quiz_validation.settings import settings

    level = settings.logging.level
    issuer = settings.security.jwt.issuer
"""

import copy
import yaml
from pathlib import Path
from typing import List, Any


# Path to the settings file
SETTINGS_FILE = Path(__file__).parent / "settings.yaml"

# Defaults (used when a key is missing from YAML)
DEFAULTS = {
    "logging": {
        "level": "INFO",
    },
    "validation": {
        "log_each_rule": False,
        "log_submissions": True,
    },
    "security": {
        "jwt": {
            "issuer": "quiz-validation",
            # base64 development key; override in production
            "secret": (
                "ZGV2LW9ubHktc2VjcmV0LWtleS1mb3ItcXVpei12YWxpZGF0aW9uLXRva2Vu"
                "cy1jaGFuZ2UtbWUtaW4tcHJvZHVjdGlvbg=="
            ),
            "ttl_millis": 3600000,
        },
    },
}


class DotDict(dict):
    """Dict with attribute access: d.key instead of d['key']"""

    def __getattr__(self, key: str) -> Any:
        try:
            value = self[key]
            if isinstance(value, dict):
                return DotDict(value)
            return value
        except KeyError:
            raise AttributeError(f"Setting '{key}' not found")

    def __setattr__(self, key: str, value: Any) -> None:
        self[key] = value

    def get_nested(self, path: str, default: Any = None) -> Any:
        """Get a value by dotted path: 'security.jwt.issuer'"""
        keys = path.split('.')
        value = self
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge of dicts (override wins)"""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_settings(filepath: Path = None) -> DotDict:
    """
    Load settings from a YAML file.

    Priority:
    1. Values from the YAML file
    2. DEFAULTS

    Args:
        filepath: Path to the settings file (settings.yaml by default)

    Returns:
        DotDict with settings
    """
    filepath = filepath or SETTINGS_FILE

    config = copy.deepcopy(DEFAULTS)

    if filepath.exists():
        with open(filepath, "r", encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}

        config = _deep_merge(config, yaml_config)
    else:
        print(f"[settings] Settings file not found: {filepath}")
        print("[settings] Using defaults")

    return DotDict(config)


def validate_settings(settings: DotDict) -> List[str]:
    """
    Validate settings.

    Returns:
        List of errors (empty when everything is OK)
    """
    errors = []

    level = settings.get_nested("logging.level", "")
    if str(level).upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
        errors.append(f"logging.level has unknown value '{level}'")

    if not settings.get_nested("security.jwt.issuer"):
        errors.append("security.jwt.issuer is not set")
    if not settings.get_nested("security.jwt.secret"):
        errors.append("security.jwt.secret is not set")

    ttl = settings.get_nested("security.jwt.ttl_millis")
    if not isinstance(ttl, int) or isinstance(ttl, bool):
        errors.append("security.jwt.ttl_millis must be an integer (negative = never expires)")

    return errors


# Global settings instance (lazy)
_settings = None


def get_settings() -> DotDict:
    """Get global settings (singleton)"""
    global _settings
    if _settings is None:
        _settings = load_settings()
        errors = validate_settings(_settings)
        if errors:
            print("[settings] Settings errors:")
            for err in errors:
                print(f"  - {err}")
    return _settings


def reload_settings() -> DotDict:
    """Reload settings from file"""
    global _settings
    _settings = None
    return get_settings()


settings = get_settings()
