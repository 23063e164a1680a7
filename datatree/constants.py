"""
Constants for the DataTree package.

Note: These constants serve as default fallback values.
The CLI can override them from a datatree.json file via ConfigManager.
"""
from pathlib import Path
from typing import Any, Optional
import json

# =============================================================================
# Index Defaults
# =============================================================================

# Key of the virtual root entry in the relation index. Never a valid node id.
ROOT_KEY = None

# Field names used when no key mapping is given
DEFAULT_ID_KEY = "id"
DEFAULT_PID_KEY = "pid"
DEFAULT_CHILD_KEY = "child"

# Display defaults (CLI only)
DEFAULT_INDENT_WIDTH = 2
DEFAULT_LABEL_KEYS = ["text", "name", "label", "title"]
STATE_MARKERS = {
    0: "[ ]",
    1: "[x]",
    2: "[-]",
}

DEFAULT_CONFIG_FILENAME = "datatree.json"


# =============================================================================
# Config Loader
# =============================================================================


class ConfigManager:
    """
    Manages loading configuration from a datatree.json file with fallback to defaults.

    Usage:
        config = ConfigManager()
        id_key = config.get_str('id_key', DEFAULT_ID_KEY)

        config = ConfigManager(config_path=Path("/custom/path/datatree.json"))
        indent = config.get_int('indent_width', DEFAULT_INDENT_WIDTH)
    """

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Initialize ConfigManager.

        Args:
            config_path: Path to the JSON config file. Defaults to ./datatree.json.
        """
        self._config: Optional[dict] = None
        self._config_path = (
            Path(config_path) if config_path is not None else Path(DEFAULT_CONFIG_FILENAME)
        )

    def _load_config(self) -> dict:
        """Load config from the JSON file."""
        if self._config is not None:
            return self._config

        if self._config_path.exists():
            try:
                with open(self._config_path, "r") as f:
                    self._config = json.load(f)
            except (json.JSONDecodeError, IOError):
                self._config = {}
        else:
            self._config = {}

        if not isinstance(self._config, dict):
            self._config = {}
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a config value with fallback to default.

        Args:
            key: Configuration key name.
            default: Value returned when the key is missing.

        Returns:
            Config value or default.
        """
        config = self._load_config()
        return config.get(key, default)

    def get_int(self, key: str, default: int) -> int:
        """Get an integer config value with fallback."""
        value = self.get(key, default)
        try:
            return int(value) if value is not None else default
        except (TypeError, ValueError):
            return default

    def get_str(self, key: str, default: str) -> str:
        """Get a string config value with fallback."""
        value = self.get(key, default)
        return str(value) if value else default

    def get_key_mapping(self) -> dict:
        """Get the id/pid/child field names, falling back to the defaults."""
        return {
            "id": self.get_str("id_key", DEFAULT_ID_KEY),
            "pid": self.get_str("pid_key", DEFAULT_PID_KEY),
            "child": self.get_str("child_key", DEFAULT_CHILD_KEY),
        }
