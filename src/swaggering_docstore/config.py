"""Compiler configuration and its YAML loader."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

# Vendor extension key read from API documents.
DEFAULT_EXTENSION_KEY = "x-swaggering-mongoose"

# Field names owned by the storage engine: primary identity and revision counter.
RESERVED_FIELDS = frozenset({"_id", "__v"})

# Extension type name that marks a field as a reference to another collection.
REFERENCE_SENTINEL = "ObjectId"

DEFAULT_MAX_REFERENCE_DEPTH = 32


class CompilerConfig(BaseModel):
    """Settings for one compilation."""

    extension_key: str = Field(
        default=DEFAULT_EXTENSION_KEY,
        description="Vendor extension key carrying engine overrides",
    )
    max_reference_depth: int = Field(
        default=DEFAULT_MAX_REFERENCE_DEPTH,
        ge=1,
        description="Maximum nesting of expanded references",
    )
    type_aliases: dict[str, str] = Field(
        default_factory=dict,
        description="Additional names accepted for extension override types",
    )


class ConfigLoader:
    """Loads compiler configuration from YAML files."""

    def load_file(self, path: Path | str) -> CompilerConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            Loaded CompilerConfig instance
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f)

        return self._parse_config(data)

    def load_from_string(self, content: str) -> CompilerConfig:
        """Load configuration from a YAML string."""
        data = yaml.safe_load(content)
        return self._parse_config(data)

    def _parse_config(self, data: dict[str, Any] | None) -> CompilerConfig:
        if data is None:
            return CompilerConfig()
        if not isinstance(data, dict):
            raise ValueError("Config must be a YAML mapping")

        # Accept the config either at the root or under a "compiler" section.
        section = data.get("compiler", data)
        return CompilerConfig(
            extension_key=section.get("extension_key", DEFAULT_EXTENSION_KEY),
            max_reference_depth=section.get("max_reference_depth", DEFAULT_MAX_REFERENCE_DEPTH),
            type_aliases=section.get("type_aliases", {}),
        )

    def save_file(self, config: CompilerConfig, path: Path | str) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = {"compiler": config.model_dump(mode="json")}

        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_config(path: Path | str | None = None) -> CompilerConfig:
    """Convenience function to load a config file.

    Returns the default configuration when no path is given.
    """
    if path is None:
        return CompilerConfig()
    return ConfigLoader().load_file(path)
