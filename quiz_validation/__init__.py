"""Quiz answer validation: rule engine, rule configuration and token helpers."""

__version__ = "0.1.0"
