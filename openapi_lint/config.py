"""
Configuration for the linter.

One engine serves every convention; the differences live here rather than in
forked copies of the validator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_DOCS_URL = "https://github.com/oxidecomputer/openapi-lint"


class NamingConvention(str, Enum):
    """Casing required of property names, parameter names and operation ids."""

    SNAKE_CASE = "snake"
    CAMEL_CASE = "camel"


@dataclass
class LintConfig:
    """Configuration options for a lint run."""

    # Casing for property names, parameter names and operation ids
    naming_convention: NamingConvention = NamingConvention.SNAKE_CASE

    # Scan titles and descriptions for implementation-specific doc markup
    check_external_docs: bool = False

    # Report constrained free-form schemas as diagnostics instead of aborting
    report_unsupported: bool = False

    # Skip header parameters in the parameter naming check
    exempt_header_parameters: bool = False

    # Base URL that rule anchors are appended to
    docs_url: str = DEFAULT_DOCS_URL

    @staticmethod
    def from_dict(d: dict) -> LintConfig:
        """Create a config from a dictionary, ignoring unknown keys."""
        config = LintConfig()
        for k, v in d.items():
            if k == "naming_convention" and isinstance(v, str):
                config.naming_convention = NamingConvention(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "naming_convention": self.naming_convention.value,
            "check_external_docs": self.check_external_docs,
            "report_unsupported": self.report_unsupported,
            "exempt_header_parameters": self.exempt_header_parameters,
            "docs_url": self.docs_url,
        }
