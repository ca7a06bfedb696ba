"""
Dataset configuration: YAML/JSON files checked against JSON Schema.

``datasets.yaml`` holds one block per dataset under ``datasets`` and an
optional ``defaults`` block that is deep-merged beneath every dataset.
"""

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
import copy
import json
import logging

import jsonschema
import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[1] / "config"
DATASETS_CONFIG = "datasets.yaml"
DATASETS_SCHEMA = "datasets_schema.json"


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated recursively by ``override``; inputs are not modified."""
    merged = copy.deepcopy(dict(base))
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, Mapping):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class ConfigManager:
    """
    Reads dataset definitions and the schemas that guard them.

    Args:
        config_dir: Directory holding configuration files (the
            ``seriescast/config`` package data by default)
        schema_dir: Directory holding JSON schemas (``<config_dir>/schemas``)
    """

    def __init__(self, config_dir: Optional[str] = None, schema_dir: Optional[str] = None):
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self.schema_dir = Path(schema_dir) if schema_dir else self.config_dir / "schemas"
        self._datasets_cache: Optional[Dict[str, Dict[str, Any]]] = None

    def load_config(self, config_name: str, schema_name: Optional[str] = None) -> Dict[str, Any]:
        """
        Read a YAML or JSON file from the config directory.

        Args:
            config_name: File name, e.g. ``datasets.yaml``
            schema_name: Schema file to validate against, if any

        Returns:
            The parsed document

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: On an unsupported extension or a schema violation
        """
        config_path = self.config_dir / config_name
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix in (".yaml", ".yml"):
                document = yaml.safe_load(f) or {}
            elif config_path.suffix == ".json":
                document = json.load(f)
            else:
                raise ValueError(f"Unsupported configuration format: {config_path.suffix}")

        if schema_name:
            self.validate_config(document, schema_name)

        logger.info(f"Loaded configuration from {config_path}")
        return document

    def validate_config(self, config: Mapping[str, Any], schema_name: str) -> None:
        """
        Check a document against a JSON schema from the schema directory.

        Raises:
            FileNotFoundError: If the schema file is missing
            ValueError: If the document does not match the schema
        """
        schema_path = self.schema_dir / schema_name
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema file not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            jsonschema.validate(instance=config, schema=schema)
        except jsonschema.exceptions.ValidationError as e:
            location = " -> ".join(str(p) for p in e.path) or "root"
            message = f"Configuration validation failed at '{location}': {e.message}"
            logger.error(message)
            raise ValueError(message) from e

        logger.debug(f"{schema_name}: document is valid")

    def load_datasets(self, config_name: str = DATASETS_CONFIG) -> Dict[str, Dict[str, Any]]:
        """
        All dataset blocks with the shared ``defaults`` merged in.

        The result is cached per manager; call ``reload`` after editing the file.
        """
        if self._datasets_cache is None:
            document = self.load_config(config_name, DATASETS_SCHEMA)
            defaults = document.get("defaults", {})
            self._datasets_cache = {
                name: deep_merge(defaults, block)
                for name, block in document["datasets"].items()
            }
            logger.info(f"Configured datasets: {sorted(self._datasets_cache)}")
        return self._datasets_cache

    def reload(self) -> None:
        """Forget cached dataset blocks."""
        self._datasets_cache = None

    def dataset_names(self) -> List[str]:
        return list(self.load_datasets())

    def dataset_block(self, name: str) -> Dict[str, Any]:
        """
        Merged configuration block of one dataset (a copy).

        Raises:
            KeyError: If the dataset is not configured
        """
        datasets = self.load_datasets()
        if name not in datasets:
            raise KeyError(f"Dataset '{name}' not configured; available: {sorted(datasets)}")
        return copy.deepcopy(datasets[name])

    def merge_configs(self, base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
        """Deep-merge ``override`` onto ``base``, e.g. to tweak a strategy block."""
        return deep_merge(base, override)

    @staticmethod
    def get_value(config: Mapping[str, Any], path: str, default: Any = None) -> Any:
        """Look up a dotted path such as ``datasets.inflation.strategy.decay_rate``."""
        current: Any = config
        for key in path.split("."):
            if not isinstance(current, Mapping) or key not in current:
                return default
            current = current[key]
        return current

    @staticmethod
    def set_value(config: Dict[str, Any], path: str, value: Any) -> None:
        """Assign at a dotted path, creating intermediate dicts in place."""
        *parents, leaf = path.split(".")
        current = config
        for key in parents:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[leaf] = value
