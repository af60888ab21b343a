"""
Message templates for diagnostics.

Templates live in lint_rules_messages.json, keyed by rule class name, and are
rendered with jinja2.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jinja2

MESSAGES_FILE = Path(__file__).parent / "lint_rules_messages.json"

_jinja_env = jinja2.Environment(
    autoescape=False,
    keep_trailing_newline=False,
    undefined=jinja2.StrictUndefined,
)

# Loaded once per process
_message_templates: dict[str, dict[str, str]] = {}


def load_message_templates() -> dict[str, dict[str, str]]:
    """Load the message templates, caching them after the first read."""
    if not _message_templates:
        with open(MESSAGES_FILE, "r", encoding="utf-8") as f:
            _message_templates.update(json.load(f))
    return _message_templates


def get_template(section: str, key: str) -> str:
    """
    Get one raw template string.

    Args:
        section: Rule class name, or "_template" for the layout templates
        key: Template key within the section (e.g. 'message', 'suggestion')

    Returns:
        The unrendered template text

    Raises:
        KeyError: If the section or key does not exist
    """
    templates = load_message_templates()
    if section not in templates:
        raise KeyError(f"No message templates found for {section}")
    if key not in templates[section]:
        raise KeyError(f"Key '{key}' not found in templates for {section}")
    return templates[section][key]


def render(section: str, key: str, **params: Any) -> str:
    """Render one template with the given parameters."""
    return _jinja_env.from_string(get_template(section, key)).render(**params)
