"""Loads and saves the issue-sync configuration file."""

import json
from datetime import datetime
from pathlib import Path

import structlog
from pydantic import ValidationError
from ruamel.yaml.error import YAMLError

from issue_sync.configuration.exceptions import InvalidConfigurationValueError
from issue_sync.configuration.models import ConfigFileModel
from issue_sync.utils.constants import CONFIG_FILE_CANDIDATES, SINCE_DATE_FORMAT
from issue_sync.utils.yaml import dump_yaml_to_file, load_yaml_file

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def find_config_file(explicit_path: Path | None = None) -> Path | None:
    """Locate the configuration file.

    An explicitly provided path must exist. Otherwise the working directory and
    then the home directory are searched for `.issue-sync.yaml` or `.issue-sync.json`.
    """
    if explicit_path is not None:
        if not explicit_path.exists():
            raise InvalidConfigurationValueError(f"Config file not found: {explicit_path.absolute()}")
        return explicit_path
    for directory in (Path.cwd(), Path.home()):
        for name in CONFIG_FILE_CANDIDATES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def load_config_file(path: Path | None) -> ConfigFileModel:
    """Load and validate the configuration file, or return empty settings without one."""
    if path is None:
        logger.debug("No configuration file found")
        return ConfigFileModel()
    try:
        content = load_yaml_file(path)
        model = ConfigFileModel.model_validate(content)
    except ValidationError as exc:
        raise InvalidConfigurationValueError(f"Invalid configuration file {path}: {exc}") from exc
    except (YAMLError, ValueError) as exc:
        raise InvalidConfigurationValueError(f"Failed to parse configuration file {path}: {exc}") from exc
    logger.info("Config file loaded", file=str(path))
    return model


def save_config_file(path: Path | None, since: datetime, field_cache: dict[str, str] | None = None) -> None:
    """Persist the `since` cursor and the custom field cache into the configuration file.

    Every other key in the file is kept as it was.
    """
    if path is None:
        logger.debug("No configuration file loaded so do not save settings")
        return
    content = load_yaml_file(path) if path.exists() else {}
    content["since"] = since.strftime(SINCE_DATE_FORMAT)
    if field_cache:
        content["fields"] = dict(field_cache)
    if path.suffix == ".json":
        path.write_text(json.dumps(content, indent=2) + "\n", encoding="utf-8")
    else:
        dump_yaml_to_file(content, path)
    logger.info("Config file saved", file=str(path), since=content["since"])
