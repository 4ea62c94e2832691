"""Configuration management for the flag migrator CLI."""

import os
from pathlib import Path
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field, field_validator
import tomli

from .formats import Format

DEFAULT_CONFIG_PATHS = [
    "flag_migrator.toml",
    ".flag_migrator.toml",
]

OUTPUT_FORMAT_ENV = "FLAG_MIGRATOR_OUTPUT_FORMAT"


class MigratorConfig(BaseModel):
    """CLI configuration model."""
    input_format: Optional[Format] = Field(
        default=None,
        description="Input format; when unset it is guessed from the file extension"
    )
    output_format: Format = Field(
        default=Format.YAML,
        description="Format used when --output-format is not given; anything but toml or json means yaml"
    )
    strict: bool = Field(
        default=False,
        description="Fail the conversion when any flag produced warnings"
    )

    @field_validator('input_format', mode='before')
    @classmethod
    def lowercase_format(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.lower()
        return value

    @field_validator('output_format', mode='before')
    @classmethod
    def resolve_output_format(cls, value: Any) -> Format:
        return Format.for_output(value)

    @classmethod
    def from_file(cls, config_path: str) -> "MigratorConfig":
        """Load configuration from a TOML file."""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(path, 'rb') as f:
            data = tomli.load(f)

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigratorConfig":
        """Load configuration from dictionary."""
        data = dict(data)
        # Override output format from environment if present
        env_format = os.getenv(OUTPUT_FORMAT_ENV)
        if env_format:
            data['output_format'] = env_format

        return cls(**data)


def load_config(config_path: Optional[str] = None) -> MigratorConfig:
    """Load configuration from file, default locations, or defaults.

    Args:
        config_path: Path to config file (optional, will search default locations if not provided)

    Returns:
        MigratorConfig object
    """
    if config_path:
        return MigratorConfig.from_file(config_path)

    for default_path in DEFAULT_CONFIG_PATHS:
        if Path(default_path).exists():
            return MigratorConfig.from_file(default_path)

    return MigratorConfig.from_dict({})
