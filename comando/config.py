"""
Config system - Typed controller configuration with layered loading.

Merge precedence (later overrides earlier):
    defaults < .env file < environment variables < manual overrides
"""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, get_args, get_origin

from dotenv import dotenv_values

from .faults import ConfigInvalidFault


@dataclass
class ComandoConfig:
    """
    Controller-layer configuration.

    Attributes:
        env: Runtime environment ("production", "development", "test")
        login_path: Redirect target for unauthenticated requests
        template_dirs: Search paths for view templates
        retry_after: Seconds advertised by 503 responses
        flash_session_key: Session key flash messages are mirrored into
    """

    env: str = "production"
    login_path: str = "/login"
    template_dirs: List[str] = field(default_factory=list)
    retry_after: int = 3600
    flash_session_key: str = "flash"

    @property
    def is_development(self) -> bool:
        return self.env == "development"


class ConfigLoader:
    """
    Loads and merges configuration from multiple sources.

    Environment keys carry a prefix (``COMANDO_`` by default); the rest of the
    key is lower-cased to find the config field, so ``COMANDO_LOGIN_PATH``
    sets ``login_path``.
    """

    def __init__(self, env_prefix: str = "COMANDO_"):
        self.env_prefix = env_prefix
        self.config_data: Dict[str, Any] = {}

    @classmethod
    def load(
        cls,
        env_file: Optional[str] = None,
        env_prefix: str = "COMANDO_",
        overrides: Optional[Dict[str, Any]] = None,
        environ: Optional[Dict[str, str]] = None,
    ) -> ComandoConfig:
        """
        Load configuration from all sources and build a ComandoConfig.

        Args:
            env_file: Path to a .env file (skipped if missing)
            env_prefix: Prefix for environment variables
            overrides: Manual overrides (highest precedence)
            environ: Environment mapping (defaults to ``os.environ``)

        Returns:
            Validated ComandoConfig instance
        """
        loader = cls(env_prefix=env_prefix)

        if env_file:
            loader._load_env_file(env_file)

        loader._load_from_env(os.environ if environ is None else environ)

        if overrides:
            loader.config_data.update(overrides)

        return loader.build()

    def _load_env_file(self, path: str) -> None:
        env_path = Path(path)
        if not env_path.exists():
            return
        self._load_from_env(dotenv_values(env_path))

    def _load_from_env(self, environ: Dict[str, Optional[str]]) -> None:
        for key, value in environ.items():
            if key.startswith(self.env_prefix) and value is not None:
                name = key[len(self.env_prefix):].lower()
                self.config_data[name] = self._parse_value(value)

    def _parse_value(self, value: str) -> Any:
        """Parse string value to appropriate type."""
        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        if value.startswith(("{", "[")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value

    def build(self) -> ComandoConfig:
        """Instantiate ComandoConfig, validating known fields and ignoring unknown ones."""
        kwargs = {}
        for field_info in fields(ComandoConfig):
            if field_info.name not in self.config_data:
                continue
            value = self.config_data[field_info.name]

            # Comma-separated lists are accepted for list fields
            if get_origin(field_info.type) is list:
                if isinstance(value, str):
                    value = [part.strip() for part in value.split(",") if part.strip()]

            if not self._check_type(value, field_info.type):
                raise ConfigInvalidFault(
                    field_info.name,
                    f"expected {field_info.type}, got {type(value).__name__}",
                )
            kwargs[field_info.name] = value

        return ComandoConfig(**kwargs)

    def _check_type(self, value: Any, expected_type: Any) -> bool:
        """Basic type checking."""
        origin = get_origin(expected_type)
        if origin:
            if not isinstance(value, origin):
                return False
            args = get_args(expected_type)
            return not args or all(isinstance(item, args[0]) for item in value)

        if expected_type is int and isinstance(value, bool):
            return False
        return isinstance(value, expected_type)
