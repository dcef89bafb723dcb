"""Configuration management for the chunkup CLI."""

import json
import os
import shutil
from pathlib import Path

from common.constants import DEFAULT_MAX_CONCURRENCY, DEFAULT_PART_SIZE_BYTES, DEFAULT_USER_NAME


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "server_host": os.environ.get("CHUNKUP_SERVER_HOST", "localhost"),
        "server_port": int(os.environ.get("CHUNKUP_SERVER_PORT", "8080")),
        "timeout": 30,
        "part_size": DEFAULT_PART_SIZE_BYTES,
        "max_concurrency": DEFAULT_MAX_CONCURRENCY,
        "user_name": os.environ.get("CHUNKUP_USER", DEFAULT_USER_NAME),
    }

    INT_KEYS = ("server_port", "timeout", "part_size", "max_concurrency")

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.chunkup/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            import tempfile
            self.config_path = Path(tempfile.gettempdir()) / '.chunkup' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError):
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except IOError:
                    pass
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError:
                pass
            return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError:
            pass

    def set(self, key: str, value: str) -> None:
        """
        Set a configuration value and save to file.

        Args:
            key: One of the DEFAULT_CONFIG keys
            value: Raw string value, converted to int for numeric keys

        Raises:
            KeyError: If key is not a known setting
            ValueError: If a numeric key gets a non-positive or non-integer value
        """
        if key not in self.DEFAULT_CONFIG:
            raise KeyError(key)
        if key in self.INT_KEYS:
            number = int(value)
            if number <= 0:
                raise ValueError(f"{key} must be positive")
            self.data[key] = number
        else:
            self.data[key] = value
        self.save()

    def get_base_url(self) -> str:
        """
        Get storage service base URL.

        Returns:
            Base URL string (e.g., "http://localhost:8080")
        """
        host = self.data.get('server_host', 'localhost')
        port = self.data.get('server_port', 8080)
        return f"http://{host}:{port}"

    def get_timeout(self) -> int:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return self.data.get('timeout', 30)

    def get_part_size(self) -> int:
        return self.data.get('part_size', DEFAULT_PART_SIZE_BYTES)

    def get_max_concurrency(self) -> int:
        return self.data.get('max_concurrency', DEFAULT_MAX_CONCURRENCY)

    def get_user_name(self) -> str:
        return self.data.get('user_name', DEFAULT_USER_NAME)
