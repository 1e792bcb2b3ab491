"""
Settings for docker-remote
Connection settings stored in a JSON file, overridable from the environment
"""

import json
import os
import logging
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    'docker_host': None,
    'timeout': 60,
    'api_version': None,
    'log_level': 'INFO',
}

# Environment variable -> (setting key, type)
ENVIRONMENT = {
    'DOCKER_HOST': ('docker_host', str),
    'DOCKER_API_VERSION': ('api_version', str),
    'DOCKER_TIMEOUT': ('timeout', int),
    'DOCKER_REMOTE_LOG_LEVEL': ('log_level', str),
}


class Settings:
    """Manager for client settings"""

    @staticmethod
    def get_user_settings_path() -> str:
        """Get path to user settings file"""
        if os.name == 'nt':  # Windows
            base_dir = os.environ.get('APPDATA', os.path.expanduser('~'))
            data_dir = os.path.join(base_dir, 'docker-remote')
        else:  # macOS, Linux
            data_dir = os.path.join(
                os.environ.get('XDG_DATA_HOME', os.path.expanduser('~/.local/share')),
                'docker-remote'
            )
        return os.path.join(data_dir, 'settings.json')

    def __init__(self, settings_file: Optional[str] = None, environ: Optional[Dict[str, str]] = None):
        """
        Initialize settings

        Args:
            settings_file: JSON file to load and save (default: per-user file)
            environ: Environment to read overrides from (default: os.environ)
        """
        self.settings_file = settings_file or self.get_user_settings_path()
        self.environ = os.environ if environ is None else environ
        self.settings: Dict[str, Any] = {}

        self.load()

    def load(self):
        """Load defaults, then the settings file, then environment overrides"""
        self.settings = DEFAULT_SETTINGS.copy()

        if os.path.exists(self.settings_file):
            try:
                with open(self.settings_file, 'r', encoding='utf-8') as f:
                    loaded_settings = json.load(f)
                if isinstance(loaded_settings, dict):
                    self.settings.update(loaded_settings)
                    logger.debug(f"Settings loaded from {self.settings_file}")
                else:
                    logger.warning(f"Could not load settings from {self.settings_file}: not a JSON object")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not load settings from {self.settings_file}: {e}")

        for variable, (key, cast) in ENVIRONMENT.items():
            value = self.environ.get(variable)
            if not value:
                continue
            try:
                self.settings[key] = cast(value)
            except ValueError:
                logger.warning(f"Ignoring invalid {variable}={value!r}")

    def save(self) -> bool:
        """Save settings to file"""
        try:
            os.makedirs(os.path.dirname(self.settings_file) or '.', exist_ok=True)
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=4, ensure_ascii=False)

            logger.info(f"Settings saved to {self.settings_file}")
            return True

        except OSError as e:
            logger.error(f"Error saving settings: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get setting value

        Args:
            key: Setting key
            default: Default value if key not found or unset

        Returns:
            Setting value
        """
        value = self.settings.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any, save: bool = False):
        """
        Set setting value

        Args:
            key: Setting key
            value: Setting value
            save: Save to file immediately
        """
        self.settings[key] = value

        if save:
            self.save()

    def update(self, settings_dict: Dict[str, Any], save: bool = False):
        """Update multiple settings"""
        self.settings.update(settings_dict)

        if save:
            self.save()

    def get_all(self) -> Dict[str, Any]:
        """Get all settings"""
        return self.settings.copy()
