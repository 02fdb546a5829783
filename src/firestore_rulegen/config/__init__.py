"""Configuration management: TOML loading and config models.

Usage:
    >>> from firestore_rulegen.config import load_rulegen_config, RulegenConfig
"""

from firestore_rulegen.config.loader import load_rulegen_config
from firestore_rulegen.config.models import RulegenConfig

__all__ = ["load_rulegen_config", "RulegenConfig"]
