"""YAML/JSON loader and registry for visualization metadata objects.

visualizations are usually exported from the UI as json, but hand-written
ones are nicer in yaml. json is valid yaml, so yaml.safe_load reads both.
"""

from pathlib import Path
from typing import Any

import yaml

from vizforge.models.visualization import VisualizationObject

SUPPORTED_SUFFIXES = (".yaml", ".yml", ".json")


def _read_file(path: Path) -> Any:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


def load_visualization(path: str | Path) -> VisualizationObject:
    """Load a single visualization object from a file.

    the object is named after the file unless it carries its own name.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Visualization file not found: {path}")

    data = _read_file(path)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a visualization object in {path}")

    data.setdefault("name", path.stem)
    return VisualizationObject.model_validate(data)


class VisualizationRegistry:
    """All visualization objects found under a directory, by name."""

    def __init__(self) -> None:
        self.visualizations: dict[str, VisualizationObject] = {}

    def load_directory(self, path: Path) -> None:
        """Load all yaml/json files from a directory, recursively."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Visualizations directory not found: {path}")

        files = sorted(p for p in path.glob("**/*") if p.suffix in SUPPORTED_SUFFIXES)
        if not files:
            raise ValueError(f"No YAML or JSON files found in {path}")

        for file in files:
            self._load_file(file)

    def _load_file(self, path: Path) -> None:
        """Parse one file.

        a file holds either one visualization object or a `visualizations:`
        list of named ones. empty files are skipped.
        """
        data = _read_file(path)
        if data is None:
            return
        if not isinstance(data, dict):
            raise ValueError(f"Expected a visualization object in {path}")

        if "visualizations" in data:
            for item in data["visualizations"]:
                if "name" not in item:
                    raise ValueError(f"Unnamed visualization in {path}")
                self._add(VisualizationObject.model_validate(item))
        else:
            data.setdefault("name", path.stem)
            self._add(VisualizationObject.model_validate(data))

    def _add(self, visualization: VisualizationObject) -> None:
        if visualization.name in self.visualizations:
            raise ValueError(f"Duplicate visualization: {visualization.name}")
        self.visualizations[visualization.name] = visualization

    def get(self, name: str) -> VisualizationObject:
        if name not in self.visualizations:
            raise KeyError(f"Unknown visualization: {name}")
        return self.visualizations[name]

    def names(self) -> list[str]:
        return list(self.visualizations)
