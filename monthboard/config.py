# Monthly board — configuration
# Override endpoints and policies via monthboard.yaml or MONTHBOARD_CONFIG.

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .errors import ConfigError

CONFIG_PATH = Path("monthboard.yaml")

EDIT_SWITCH_POLICIES = ("discard", "reject")
MENU_MOVE_MODES = ("remote", "local")


@dataclass
class Config:
    """Runtime configuration for the monthly board."""

    # Task store
    api_base_url: str = "http://localhost:8000/api"
    token_env: str = "MONTHBOARD_TOKEN"
    request_timeout: float = 5
    login_url: str = "/login"

    # Behavior
    edit_switch_policy: str = "discard"   # "discard": new edit drops the open draft
    menu_move_mode: str = "remote"        # "local": menu moves skip the store

    # Server
    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"

    def validate(self) -> "Config":
        if self.edit_switch_policy not in EDIT_SWITCH_POLICIES:
            raise ConfigError(
                f"edit_switch_policy must be one of {EDIT_SWITCH_POLICIES}, "
                f"got {self.edit_switch_policy!r}"
            )
        if self.menu_move_mode not in MENU_MOVE_MODES:
            raise ConfigError(
                f"menu_move_mode must be one of {MENU_MOVE_MODES}, "
                f"got {self.menu_move_mode!r}"
            )
        if not self.api_base_url:
            raise ConfigError("api_base_url is required")
        return self

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load config from YAML file, falling back to defaults."""
        cfg_path = Path(path or os.environ.get("MONTHBOARD_CONFIG") or CONFIG_PATH)
        if cfg_path.exists():
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Cannot parse {cfg_path}: {e}") from e
            if not isinstance(data, dict):
                raise ConfigError(f"{cfg_path} must contain a mapping")
            cfg = cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})
        else:
            cfg = cls()
        return cfg.validate()
