"""Pydantic models for rulegen configuration."""

from pydantic import BaseModel


# ============================================================================
# Configuration Models
# ============================================================================


class RulegenConfig(BaseModel):
    """Complete configuration from rulegen.toml."""

    schema_file: str = "schema.json"
    output_file: str | None = None  # None prints to stdout
    indent: str = "  "  # Replaces tabs in written output; "\t" keeps tabs
    strict: bool = False  # Refuse to write rules when check_schema() fails
