"""Contains utility functions for working with YAML files."""

from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

yaml = YAML(typ="safe")


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Loads a YAML (or JSON) file and returns a dictionary.

    An empty file yields an empty dictionary.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top level of {path}, found {type(data).__name__}")
    return data


def create_yaml_dumper() -> YAML:
    """Creates a properly configured YAML object for dumping."""
    yaml_dumper = YAML()
    yaml_dumper.default_flow_style = False
    yaml_dumper.indent(mapping=2, sequence=4, offset=2)  # type: ignore[attr-defined]
    yaml_dumper.width = 4096  # Prevent line wrapping for long lines
    return yaml_dumper


def dump_yaml_to_file(data: Any, file_path: Path) -> None:
    """Dumps data to a YAML file."""
    yaml_dumper = create_yaml_dumper()
    with open(file_path, "w", encoding="utf-8") as f:
        yaml_dumper.dump(data, f)  # type: ignore[misc]
