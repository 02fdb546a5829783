"""Configuration loading from rulegen.toml."""

import tomllib
from pathlib import Path

from firestore_rulegen.config.models import RulegenConfig


def load_rulegen_config(config_path: Path | None = None) -> RulegenConfig:
    """Load rule generation configuration from TOML file.

    Args:
        config_path: Path to rulegen.toml (default: ``Path.cwd() / "rulegen.toml"``)

    Returns:
        RulegenConfig with schema and output settings

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = Path.cwd() / "rulegen.toml"

    if not config_path.exists():
        raise FileNotFoundError(
            f"Rulegen config not found: {config_path}\n"
            f"Create rulegen.toml with [schema] and [output] sections."
        )

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse schema settings
    schema_settings = data.get("schema", {})

    # Parse output settings
    output_settings = data.get("output", {})

    return RulegenConfig(
        schema_file=schema_settings.get("file", "schema.json"),
        output_file=output_settings.get("file"),
        indent=output_settings.get("indent", "  "),
        strict=output_settings.get("strict", False),
    )
