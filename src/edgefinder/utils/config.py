# src/edgefinder/utils/config.py
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, cast

from omegaconf import DictConfig, OmegaConf
from pydantic import ValidationError

from .config_schema import Config
from .logger import log_error, log_info

DEFAULT_CONFIG_PATH = "conf/config.yaml"


def validate_config(config: DictConfig) -> Dict[str, Any]:
    """
    Validates an OmegaConf DictConfig object against the Pydantic model.
    """
    try:
        config_dict = OmegaConf.to_container(config, resolve=True)

        if not isinstance(config_dict, dict):
            raise TypeError(
                f"Config validation failed: expected a mapping, got {type(config_dict)}"
            )

        Config(**config_dict)
        log_info("Configuration validation successful.")
        return cast(Dict[str, Any], config_dict)
    except ValidationError as e:
        log_error("Configuration is invalid!")
        log_error(str(e))
        raise


def load_raw_config(
    path: str | Path = DEFAULT_CONFIG_PATH, overrides: Optional[Iterable[str]] = None
) -> DictConfig:
    """Loads the YAML config and applies command-line 'key=value' overrides."""
    cfg = OmegaConf.load(path)
    if not isinstance(cfg, DictConfig):
        raise TypeError(f"Expected a mapping at the top of {path}.")
    for override in overrides or []:
        key, value = override.split("=", 1)
        OmegaConf.update(cfg, key, value)
    return cfg


def load_config(
    path: str | Path = DEFAULT_CONFIG_PATH, overrides: Optional[Iterable[str]] = None
) -> Config:
    return Config(**validate_config(load_raw_config(path, overrides)))
