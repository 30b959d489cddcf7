"""Configuration service - loads and saves kodiremote.conf"""

import json
import logging
import os
import shutil
from pathlib import Path

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator

from kodiremote.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "KODIREMOTE_CONFIG"
DEFAULT_CONFIG_FILE = Path.home() / ".config" / "kodiremote" / "kodiremote.conf"
DEFAULT_PORT = 8080
DEFAULT_TIMEOUT = 5.0


class Configuration(BaseModel):
    """Where Kodi's web server is and how long to wait for it"""

    # Older config files were written with capitalised keys
    host: str = Field("", validation_alias=AliasChoices("host", "Host"))
    port: int = Field(DEFAULT_PORT, ge=1, le=65535, validation_alias=AliasChoices("port", "Port"))
    timeout: float = Field(DEFAULT_TIMEOUT, gt=0)

    @field_validator("port", mode="before")
    @classmethod
    def empty_port_means_default(cls, value):
        if value == "" or value is None:
            return DEFAULT_PORT
        return value

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}/jsonrpc"


def default_config_file() -> Path:
    override = os.getenv(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_FILE


class ConfigService:
    def __init__(self, config_file: Path | None = None):
        self.config_file = config_file or default_config_file()
        self._config: Configuration | None = None

    def load(self) -> Configuration:
        """Load config from file, creating a default one if there is none"""
        if not self.config_file.exists():
            logger.debug("No config at %s, writing defaults", self.config_file)
            self.save(Configuration())
            return self._config

        try:
            with open(self.config_file, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not read {self.config_file}: {e}") from e

        self._config = self._validate(data)
        logger.debug("Loaded config from %s", self.config_file)
        return self._config

    def save(self, config: Configuration | None = None) -> None:
        """Save config to file (creates backup first)"""
        if config is not None:
            self._config = config

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True, mode=0o700)

            # Create backup
            backup_path = self.config_file.with_name(self.config_file.name + '.bak')
            if self.config_file.exists():
                shutil.copy(self.config_file, backup_path)

            with open(self.config_file, 'w') as f:
                json.dump(self._config.model_dump(), f, indent=2)
        except OSError as e:
            raise ConfigurationError(f"Could not write {self.config_file}: {e}") from e
        logger.debug("Saved config to %s", self.config_file)

    @property
    def config(self) -> Configuration:
        """Get current config (loads if not cached)"""
        if self._config is None:
            self.load()
        return self._config

    def reload(self) -> Configuration:
        """Force reload from disk"""
        return self.load()

    def update(self, host: str | None = None, port: int | str | None = None,
               timeout: float | str | None = None) -> Configuration:
        """Change the given settings and save them"""
        try:
            data = self.config.model_dump()
        except ConfigurationError as e:
            logger.warning("%s, starting from defaults", e)
            data = Configuration().model_dump()
        if host is not None:
            data['host'] = host
        if port is not None:
            data['port'] = port
        if timeout is not None:
            data['timeout'] = timeout

        config = self._validate(data)
        self.save(config)
        return config

    def _validate(self, data) -> Configuration:
        try:
            return Configuration.model_validate(data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in err['loc']) or 'config'}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(f"Invalid configuration in {self.config_file}: {problems}") from e
