"""
Configuration loader for procwatch.

This module provides the ConfigLoader class for loading and validating
monitor configuration from YAML files.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from procwatch.config.monitor_config import MonitorConfig
from procwatch.service.dataset import attribute_registry
from procwatch.service.exporter import exporter_registry
from procwatch.service.monitor.process_watcher import DEFAULT_SLEEP_INTERVAL
from procwatch.util.log_config import DEFAULT_LOG_LEVEL, resolve_level

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config_yaml"
DEFAULT_RECORD_INTERVAL = 1.0
DEFAULT_RECORD_FRAMES = 5


class ConfigLoader:

    def __init__(self, config_path: Optional[Path] = None, env: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_DIR
        self.env = env
        self.config_data = self._load_config()

    def _read_yaml(self, file: Path) -> Dict[str, Any]:
        with open(file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"{file} must contain a mapping at the top level")
        return data

    def _load_config(self) -> MonitorConfig:
        """
        Load and parse monitor configuration from YAML file.
        Supports environment-specific overrides via config_<env>.yaml

        Returns:
            MonitorConfig: Validated monitor configuration instance

        Raises:
            FileNotFoundError: If config.yaml (or the env override) is missing
            ValueError: If a value is out of range or names an unknown plugin
        """
        data = self._read_yaml(self.config_path / "config.yaml")

        if self.env:
            # Top-level keys of the env file replace the base ones
            data.update(self._read_yaml(self.config_path / f"config_{self.env}.yaml"))

        config = MonitorConfig()
        config.sleep_interval = self._positive(data, "sleep_interval", DEFAULT_SLEEP_INTERVAL, float)
        config.record_interval = self._positive(data, "record_interval", DEFAULT_RECORD_INTERVAL, float)
        config.record_frames = self._positive(data, "record_frames", DEFAULT_RECORD_FRAMES, int)

        output_dir = data.get("output_dir")
        config.output_dir = Path(output_dir).expanduser() if output_dir else None

        config.log_level = str(data.get("log_level") or DEFAULT_LOG_LEVEL).upper()
        resolve_level(config.log_level)

        log_file = data.get("log_file")
        config.log_file = Path(log_file).expanduser() if log_file else None

        config.attributes = self._names(data, "attributes", list(attribute_registry.discover()), attribute_registry)
        config.exporters = self._names(data, "exporters", list(exporter_registry.discover()), exporter_registry)

        return config

    @staticmethod
    def _positive(data: Dict[str, Any], key: str, default, cast):
        value = cast(data.get(key, default))
        if value <= 0:
            raise ValueError(f"{key} must be positive, got {value}")
        return value

    @staticmethod
    def _names(data: Dict[str, Any], key: str, default: List[str], registry) -> List[str]:
        names = data.get(key)
        if names is None:
            return default
        if not isinstance(names, list):
            raise ValueError(f"{key} must be a list, got {type(names).__name__}")

        unknown = [name for name in names if name not in registry]
        if unknown:
            raise ValueError(f"Unknown {registry.kind}(s) in {key}: {', '.join(map(str, unknown))}")

        # Keep order, drop repeats
        return list(dict.fromkeys(names))


if __name__ == "__main__":

    # python3 -m procwatch.config.config_loader

    loader = ConfigLoader()
    print(loader.config_data)
