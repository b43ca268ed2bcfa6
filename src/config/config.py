import json
import os
import platform
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger().bind(module="config")

CONFIG_DIR = Path(__file__).parent
DEFAULT_CONFIG_FILES = ("system.json", "logging.json", "map.json")


class ConfigNode:
    """A node in the configuration tree that allows both dictionary and attribute access."""

    def __init__(self, data: Dict[str, Any]):
        self._data = {}

        for key, value in data.items():
            if isinstance(value, dict):
                self._data[key] = ConfigNode(value)
            else:
                self._data[key] = value

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._data:
            return self._data[name]
        raise AttributeError(f"Config has no attribute '{name}'")

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the config node to a plain dictionary.

        Returns:
            Dict[str, Any]: The complete configuration dictionary
        """
        result = {}

        for key, value in self._data.items():
            if isinstance(value, ConfigNode):
                result[key] = value.to_dict()
            else:
                result[key] = value

        return result


class Config(ConfigNode):
    """Configuration class that maintains hierarchical structure from JSON files."""

    def __init__(
        self, json_files: List[str], env_path: Optional[Path] = None
    ) -> None:
        """
        Load configuration from a list of JSON files.

        Args:
            json_files: JSON files to load; one of them must be system.json,
                which selects the ENVIRONMENT
            env_path: Directory for environment-specific overrides; defaults
                to the per-user configuration directory
        """
        self._json_files = [str(f) for f in json_files]

        # First determine our environment from system.json
        system_json = next(
            (f for f in self._json_files if f.endswith("system.json")), None
        )
        if system_json is None:
            raise ValueError("Configuration requires a system.json file")
        with open(system_json, "r") as f:
            system_config = json.load(f)
            self._environment = system_config.get("ENVIRONMENT", "development")

        self._env_path = None
        if self._environment != "development":
            self._env_path = env_path or self._get_env_specific_path()
            self._ensure_env_config_exists()

        super().__init__(self._load_tree())

    @property
    def environment(self) -> str:
        return self._environment

    def _load_tree(self) -> Dict[str, Any]:
        """Load source files, overlaying environment files outside development."""
        config_tree = {}

        for json_file in self._json_files:
            source_path = Path(json_file)
            try:
                with open(source_path, "r") as f:
                    data = json.load(f)
            except FileNotFoundError:
                logger.warning("Configuration file not found", file=str(source_path))
                continue
            self._merge_config(config_tree, data)

            if self._env_path is not None:
                env_file = self._env_path / source_path.name
                if env_file.exists():
                    try:
                        with open(env_file, "r") as f:
                            self._merge_config(config_tree, json.load(f))
                    except json.JSONDecodeError:
                        logger.warning(
                            "Invalid JSON in environment config", file=str(env_file)
                        )

        return config_tree

    def _ensure_env_config_exists(self) -> None:
        """Ensure environment-specific config files exist.

        If running in a non-development environment for the first time,
        this copies the default configs to the environment-specific location
        while maintaining the original source files unchanged.
        """
        self._env_path.mkdir(parents=True, exist_ok=True)

        for json_file in self._json_files:
            source_path = Path(json_file)
            env_file = self._env_path / source_path.name

            if not env_file.exists() and source_path.exists():
                with source_path.open("r") as src, env_file.open("w") as dst:
                    content = json.load(src)
                    json.dump(content, dst, indent=2)
                logger.info("Created environment config", file=str(env_file))

    def _merge_config(self, tree: Dict[str, Any], new_data: Dict[str, Any]) -> None:
        """Merge while maintaining hierarchy."""
        for key, value in new_data.items():
            if isinstance(value, dict):
                if key not in tree:
                    tree[key] = {}
                current = tree[key]
                for subkey, subvalue in value.items():
                    logger.debug("Setting config value", key=f"{key}.{subkey}")
                    current[subkey] = subvalue
            else:
                logger.debug("Setting config value", key=key)
                tree[key] = value

    def _get_env_specific_path(self) -> Path:
        """Get the environment-specific configuration path based on the operating system."""
        system = platform.system().lower()
        logger.info("Determining environment path for system", system=system)

        if system == "windows":
            base_path = Path(os.getenv("APPDATA", Path.home()))
        elif system == "darwin":
            base_path = Path.home() / "Library" / "Application Support"
        else:
            base_path = Path.home() / ".config"

        final_path = base_path / "vertexedit" / "config"
        logger.info("Final environment config path", path=str(final_path))
        return final_path


def default_config_files() -> List[str]:
    """Get the paths of the bundled configuration files."""
    return [str(CONFIG_DIR / name) for name in DEFAULT_CONFIG_FILES]


def load_config(env_path: Optional[Path] = None) -> Config:
    """Load the bundled configuration."""
    return Config(default_config_files(), env_path=env_path)
