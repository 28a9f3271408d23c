"""
graphs package

Declarative flowchart data: bundled samples, grid placement and JSON loading.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Dict, List, Union

from graphs import does_it_work
from graphs.placement import GridPlacement
from models import GraphSpec
from schemas import validate_graph_document

# Sample name -> factory returning a fresh GraphSpec
SAMPLE_GRAPHS: Dict[str, Callable[[], GraphSpec]] = {
    does_it_work.NAME: does_it_work.build,
}


def sample_names() -> List[str]:
    return sorted(SAMPLE_GRAPHS)


def load_sample(name: str) -> GraphSpec:
    """Return the bundled graph called ``name``.

    Raises:
        KeyError: If there is no such sample.
    """
    try:
        factory = SAMPLE_GRAPHS[name]
    except KeyError:
        raise KeyError(f"Unknown sample graph {name!r}; available: {', '.join(sample_names())}") from None
    return factory()


def load_graph_file(path: Union[str, Path]) -> GraphSpec:
    """Load a graph from a JSON file.

    Args:
        path: Path to a JSON document with ``nodes`` and ``edges`` arrays.

    Returns:
        The validated GraphSpec.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the JSON is malformed or describes an invalid graph.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"{path}: invalid JSON: {e}") from e
    ok, errors = validate_graph_document(data)
    if not ok:
        raise ValueError(f"{path}: " + "; ".join(errors))
    if "name" not in data:
        data = dict(data, name=path.stem)
    return GraphSpec.from_dict(data)


def save_graph_file(spec: GraphSpec, path: Union[str, Path]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(spec.to_dict(), f, indent=2, ensure_ascii=False)
        f.write("\n")


__all__ = [
    "GridPlacement",
    "SAMPLE_GRAPHS",
    "sample_names",
    "load_sample",
    "load_graph_file",
    "save_graph_file",
]
