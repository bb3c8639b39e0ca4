"""Store configuration with YAML support."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import field_validator

from .paths import validate_store_name
from .schemas import BaseSchema


class StoreConfig(BaseSchema):
    """Settings needed to build a ``Database``."""

    name: str
    save_path: str | None = None
    data_dir: str | None = None
    autosave: bool = False

    @field_validator("name")
    @classmethod
    def name_is_valid(cls, value: str) -> str:
        return validate_store_name(value)


def load_config(yaml_path: str | Path) -> StoreConfig:
    """Load store configuration from a YAML file.

    Args:
        yaml_path: Path to YAML configuration file

    Returns:
        StoreConfig instance

    Raises:
        FileNotFoundError: If YAML file doesn't exist
        ValueError: If YAML is invalid or missing required fields
    """
    yaml_path = Path(yaml_path)

    if not yaml_path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    with open(yaml_path, "r", encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {yaml_path}: {e}") from e

    if not data:
        raise ValueError(f"Empty or invalid YAML file: {yaml_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping in {yaml_path}, got {type(data).__name__}")

    try:
        return StoreConfig.from_dict(data)
    except Exception as e:
        raise ValueError(f"Invalid configuration in {yaml_path}: {e}") from e


def save_config(config: StoreConfig, yaml_path: str | Path) -> None:
    """Save store configuration to a YAML file.

    Args:
        config: StoreConfig to save
        yaml_path: Path where to save YAML file
    """
    yaml_path = Path(yaml_path)
    yaml_path.parent.mkdir(parents=True, exist_ok=True)

    with open(yaml_path, "w", encoding="utf-8") as f:
        yaml.safe_dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)
