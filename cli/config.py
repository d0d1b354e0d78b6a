"""Client settings: which file server to talk to, and how patiently."""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Callable, Optional, Tuple

from common.constants import DEFAULT_SERVER_PORT
from common.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / '.filehost' / 'config.json'

BUILTIN_DEFAULTS = {
    "server_host": "localhost",
    "server_port": DEFAULT_SERVER_PORT,
    "timeout": 30,
    "max_retries": 3,
    "retry_backoff_multiplier": 2,
}


class ConfigError(ValueError):
    """Raised when a server address or setting cannot be used."""
    pass


def _host(value: Any) -> str:
    if not isinstance(value, str) or not value.strip() or any(ch in value for ch in "/ \t"):
        raise ConfigError(f"Invalid server host: {value!r}")
    return value.strip()


def _port(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"Invalid server port: {value!r}")
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid server port: {value!r}")
    if not 1 <= port <= 65535:
        raise ConfigError(f"Server port out of range: {port}")
    return port


def _positive_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"Expected a positive number, got {value!r}")
    return value


def _retry_count(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ConfigError(f"Expected a non-negative integer, got {value!r}")
    return value


VALIDATORS: dict[str, Callable[[Any], Any]] = {
    "server_host": _host,
    "server_port": _port,
    "timeout": _positive_number,
    "max_retries": _retry_count,
    "retry_backoff_multiplier": _positive_number,
}


def parse_server_address(address: str) -> Tuple[str, Optional[int]]:
    """
    Split "host" or "host:port" into its parts.

    Raises:
        ConfigError: If host or port is unusable
    """
    host, sep, port = address.rpartition(":")
    if not sep:
        return _host(address), None
    return _host(host), _port(port)


def default_settings() -> dict:
    """
    Built-in defaults with the server address taken from FILEHOST_SERVER_HOST
    and FILEHOST_SERVER_PORT when those are set and valid.
    """
    settings = dict(BUILTIN_DEFAULTS)
    for key, env_name in (("server_host", "FILEHOST_SERVER_HOST"), ("server_port", "FILEHOST_SERVER_PORT")):
        raw = os.environ.get(env_name)
        if raw is None:
            continue
        try:
            settings[key] = VALIDATORS[key](raw)
        except ConfigError as e:
            logger.warning(f"Ignoring {env_name}: {e}")
    return settings


class Config:
    """
    Settings stored as JSON, usually at ~/.filehost/config.json.

    Unreadable files are moved aside to config.json.bak; individual invalid
    values fall back to their defaults. Unknown keys are kept as they are.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
        self.data = self._load()

    def _load(self) -> dict:
        defaults = default_settings()
        stored = self._read_file()
        if stored is None:
            self.data = dict(defaults)
            self.save()
            return self.data

        settings = dict(defaults)
        for key, value in stored.items():
            check = VALIDATORS.get(key)
            if check is None:
                settings[key] = value
                continue
            try:
                settings[key] = check(value)
            except ConfigError as e:
                logger.warning(f"{self.config_path}: {e}; using {defaults[key]!r}")
        return settings

    def _read_file(self) -> Optional[dict]:
        """Return the stored settings, {} if the file is unusable, None if absent."""
        if not self.config_path.exists():
            return None
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self._back_up(f"unreadable ({e})")
            return {}
        if not isinstance(data, dict):
            self._back_up("not a JSON object")
            return {}
        return data

    def _back_up(self, reason: str) -> None:
        backup_path = self.config_path.with_suffix('.json.bak')
        try:
            shutil.copy(self.config_path, backup_path)
        except OSError as e:
            logger.warning(f"Could not back up {self.config_path}: {e}")
            return
        logger.warning(f"Config {self.config_path} is {reason}; saved a copy to {backup_path}, using defaults")

    def save(self) -> None:
        """Write settings to disk; failures are logged, not raised."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self.data, f, indent=2)
        except OSError as e:
            logger.warning(f"Could not save config to {self.config_path}: {e}")

    def set_server(self, host: str, port: Optional[int] = None) -> None:
        """
        Point the client at another server.

        Raises:
            ConfigError: If host or port is unusable
        """
        self.data['server_host'] = _host(host)
        if port is not None:
            self.data['server_port'] = _port(port)

    def get_base_url(self) -> str:
        return f"http://{self.data['server_host']}:{self.data['server_port']}"

    def get_timeout(self) -> float:
        return self.data['timeout']

    def get_retry_config(self) -> dict:
        return {
            'max_retries': self.data['max_retries'],
            'retry_backoff_multiplier': self.data['retry_backoff_multiplier'],
        }
