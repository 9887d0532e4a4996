import os
import yaml
from pydantic import ValidationError

from .config_schema import ConfigModel


def load_config(config_path: str = "configs/config.yaml") -> dict:
    """Load the dataset-generation settings (rating filter, game cap,
    encoding side, output directory, logging) from a YAML file.

    Sections and fields left out of the file fall back to the defaults of
    :class:`~utils.config_schema.ConfigModel`.

    Args:
        config_path: Path to the configuration file.

    Returns:
        dict: The validated configuration with defaults applied.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        ValueError: If the file is not valid YAML, is not a mapping, or
            fails schema validation.
    """

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found at: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        try:
            raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    return validate_config(raw_config)


def validate_config(raw_config: dict) -> dict:
    """Validate an already-parsed mapping and return it with defaults applied."""
    if not isinstance(raw_config, dict):
        raise ValueError(
            f"Invalid configuration: expected a mapping, got {type(raw_config).__name__}"
        )

    try:
        validated = ConfigModel(**raw_config)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    return validated.model_dump()


def default_config() -> dict:
    """Return the configuration used when no file is given."""
    return ConfigModel().model_dump()
