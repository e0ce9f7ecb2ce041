"""
Configuration loading for MySQL Dump Archiver.
"""

import os
import re
from typing import Any

import yaml


class ConfigLoader:
    """Loads dump jobs and instances from a YAML file."""

    ENV_VAR_PATTERN = re.compile(r'\$\{([^}]+)\}')

    def __init__(self, config_path: str):
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> dict[str, Any]:
        with open(self.config_path, 'r') as f:
            config = yaml.safe_load(f)

        return self._resolve_env_vars(config or {})

    def _resolve_env_vars(self, obj: Any) -> Any:
        """Replace ${VAR} references in strings, recursing into dicts and lists."""
        if isinstance(obj, str):
            return self.ENV_VAR_PATTERN.sub(lambda m: os.environ.get(m.group(1), ''), obj)
        elif isinstance(obj, dict):
            return {k: self._resolve_env_vars(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._resolve_env_vars(item) for item in obj]
        return obj

    def get_instance(self, instance_name: str) -> dict[str, Any]:
        """Get connection settings of a named instance."""
        instances = self.config.get('instances') or {}
        if instance_name not in instances:
            raise ValueError(f"Instance '{instance_name}' not found in configuration")
        return instances[instance_name] or {}

    def get_dumps(self) -> list[dict[str, Any]]:
        """Get the list of dump jobs."""
        return self.config.get('dumps') or []

    def get_defaults(self) -> dict[str, Any]:
        """Get dump options shared by every job."""
        return self.config.get('defaults') or {}

    def get_logging_settings(self) -> dict[str, Any]:
        return self.config.get('logging') or {}
