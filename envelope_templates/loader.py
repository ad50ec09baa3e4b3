"""
Template Loader

Reads a template YAML file, normalizes its keys and validates the
structure against TEMPLATE_SCHEMA. Any problem fails fast with a
ConfigurationError so that no partially built template escapes.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import jsonschema
import yaml

from .config import Config
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CHILD_FIELDS_SCHEMA = {"type": ["array", "null"], "items": {"type": "object"}}

FIELD_GROUPS_SCHEMA = {
    "type": ["object", "null"],
    "additionalProperties": {
        "type": ["array", "null"],
        "items": {
            "type": "object",
            "properties": {
                "radios": CHILD_FIELDS_SCHEMA,
                "list_items": CHILD_FIELDS_SCHEMA,
            },
        },
    },
}

TEMPLATE_SCHEMA = {
    "type": "object",
    "required": ["recipients", "documents"],
    "properties": {
        "name": {"type": ["string", "null"]},
        "template_options": {"type": ["object", "null"]},
        "recipients": {
            "type": "object",
            "additionalProperties": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "pdf_fields": FIELD_GROUPS_SCHEMA,
                        "tabs": FIELD_GROUPS_SCHEMA,
                    },
                },
            },
        },
        "documents": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["document_id", "path"],
                "properties": {
                    "document_id": {"type": ["string", "integer"]},
                    "path": {"type": "string"},
                },
            },
        },
    },
}


def normalize_keys(value: Any) -> Any:
    """Recursively convert every mapping key to a string."""
    if isinstance(value, dict):
        return {str(key): normalize_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [normalize_keys(item) for item in value]
    return value


def template_path(base_directory: str, template_name: str) -> Path:
    """
    Locate the template file, trying each configured extension in order.

    Returns the first candidate when none exists so errors name a real path.
    """
    candidates = [Path(base_directory) / f"{template_name}.{ext}" for ext in Config.TEMPLATE_EXTENSIONS]
    return next((path for path in candidates if path.exists()), candidates[0])


def load_template(base_directory: str, template_name: str) -> Dict[str, Any]:
    """
    Load and validate a template definition.

    Args:
        base_directory: Directory containing the template and its PDFs
        template_name: File name without extension

    Returns:
        The template data with string keys throughout
    """
    path = template_path(base_directory, template_name)

    try:
        raw = yaml.safe_load(path.read_text())
    except FileNotFoundError as e:
        raise ConfigurationError(f"Template not found: {path}", template_path=str(path)) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"{path.name}: YAML syntax error - {e}", template_path=str(path)) from e

    if not raw:
        raise ConfigurationError(f"{path.name}: Empty template definition", template_path=str(path))

    data = normalize_keys(raw)

    try:
        jsonschema.validate(data, TEMPLATE_SCHEMA)
    except jsonschema.ValidationError as e:
        location = "/".join(str(part) for part in e.absolute_path) or "<root>"
        logger.error(f"Invalid template {path}: {e.message} at {location}")
        raise ConfigurationError(
            f"{path.name}: Schema validation failed at {location}: {e.message}",
            template_path=str(path)
        ) from e

    logger.debug(f"Loaded template {path}")
    return data
