"""
schemas/__init__.py

JSON Schema for graph documents and validation helpers.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, List, Optional, Tuple

from jsonschema import Draft202012Validator

# Schema file paths
SCHEMA_DIR = os.path.dirname(os.path.abspath(__file__))
GRAPH_SCHEMA_PATH = os.path.join(SCHEMA_DIR, "graph_schema.json")

# Cached schema
_graph_schema: Optional[Dict] = None


def get_graph_schema() -> Dict:
    """Load and return the graph document schema."""
    global _graph_schema
    if _graph_schema is None:
        with open(GRAPH_SCHEMA_PATH, "r", encoding="utf-8") as f:
            _graph_schema = json.load(f)
    return _graph_schema


def validate_graph_document(data: Any) -> Tuple[bool, List[str]]:
    """
    Validate a parsed graph document against the schema.

    Side names and node references are checked later, when the document is
    turned into a GraphSpec.

    Args:
        data: The JSON data to validate

    Returns:
        Tuple of (is_valid, list_of_error_messages)
    """
    validator = Draft202012Validator(get_graph_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])

    if not errors:
        return True, []

    error_messages = []
    for error in errors:
        path = " -> ".join(str(p) for p in error.absolute_path) if error.absolute_path else "root"
        error_messages.append(f"{path}: {error.message}")

    return False, error_messages
