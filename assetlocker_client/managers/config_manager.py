"""
AssetLocker Client - Configuration Manager

Handles loading and saving client configuration from/to assetlocker.json
in the project root.

Author: AssetLocker Project
"""

import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any

# Configure logging
logger = logging.getLogger(__name__)


CONFIG_FILENAME = "assetlocker.json"

# Default configuration values
DEFAULT_CONFIG = {
    "server_url": "http://localhost",
    "server_port": 8000,
    "verify_ssl": True,
    "username": None,  # Identity used for every lock request
    "project_root": None,  # None means the directory holding the config file
    "request_timeout_seconds": 10,
    "refresh_interval_seconds": 10,
    "auto_unlock_interval_seconds": 60,
    "shutdown_timeout_seconds": 30,
    "guarded_extensions": [".prefab", ".unity"],
    "log_level": "INFO",
    "log_retention_days": 30
}


class ConfigManager:
    """
    Manages client configuration.

    Responsibilities:
    - Load/save assetlocker.json in the project root
    - Merge missing keys with defaults
    - Provide configuration values to other modules
    """

    def __init__(self, base_dir: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            base_dir: Directory holding the config file (defaults to the current directory)
        """
        self.base_dir = Path(base_dir) if base_dir is not None else Path.cwd()
        self.config_file = self.base_dir / CONFIG_FILENAME
        self.config: Dict[str, Any] = {}

    def load_config(self) -> Dict[str, Any]:
        """
        Load configuration from assetlocker.json.
        Creates default config if file doesn't exist.

        Returns:
            Configuration dictionary
        """
        if self.config_file.exists():
            logger.debug(f"Loading configuration from {self.config_file}")
            with open(self.config_file, 'r') as f:
                self.config = json.load(f)
            # Merge with defaults for any missing keys
            for key, value in DEFAULT_CONFIG.items():
                if key not in self.config:
                    self.config[key] = value
            logger.info("Configuration loaded successfully")
        else:
            logger.info(f"Configuration file not found, creating default at {self.config_file}")
            self.config = json.loads(json.dumps(DEFAULT_CONFIG))
            self.save_config()

        return self.config

    def save_config(self):
        """Save current configuration to assetlocker.json."""
        logger.debug(f"Saving configuration to {self.config_file}")
        with open(self.config_file, 'w') as f:
            json.dump(self.config, f, indent=2)
        logger.debug("Configuration saved successfully")

    def get(self, key: str, default=None) -> Any:
        """
        Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self.config.get(key, default)

    def set(self, key: str, value: Any):
        """
        Set configuration value and save to file.

        Args:
            key: Configuration key
            value: Configuration value
        """
        self.config[key] = value
        self.save_config()

    def get_service_url(self) -> str:
        """
        Build the lock service endpoint from server_url and server_port.

        Returns:
            Base URL such as "http://locks.studio.local:8000"
        """
        server_url = str(self.get("server_url", DEFAULT_CONFIG["server_url"])).rstrip("/")
        if "://" not in server_url:
            server_url = f"http://{server_url}"

        server_port = self.get("server_port")
        if server_port:
            return f"{server_url}:{server_port}"
        return server_url

    def get_project_root(self) -> Path:
        """
        Get the project root that asset paths are relative to.

        Returns:
            Configured project_root, or the directory holding the config file
        """
        project_root = self.get("project_root")
        if project_root:
            root = Path(project_root)
            if not root.is_absolute():
                root = self.base_dir / root
            return root
        return self.base_dir

    def get_guarded_extensions(self) -> tuple:
        """Get the lower-cased file extensions protected by the save gate."""
        extensions = self.get("guarded_extensions") or []
        return tuple(ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions)
