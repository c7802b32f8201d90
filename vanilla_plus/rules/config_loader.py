"""Load the Haunted House configuration document from disk."""

import json
import logging
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from vanilla_plus.models.config import HauntedHouseConfig
from vanilla_plus.rules.ruleset import ConfigError

logger = logging.getLogger(__name__)


def load_config(path: Union[str, Path]) -> HauntedHouseConfig:
    """
    Read a JSON config file.

    A missing file yields the defaults. Unparseable JSON or an invalid scalar
    value raises ConfigError; list entries are validated later by the rule set.
    """
    path = Path(path)
    if not path.exists():
        logger.info("No config at %s, using defaults", path)
        return HauntedHouseConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read config {path}: {e}") from e

    try:
        return HauntedHouseConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e


def save_config(config: HauntedHouseConfig, path: Union[str, Path]) -> None:
    Path(path).write_text(config.model_dump_json(indent=2), encoding="utf-8")
