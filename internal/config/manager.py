"""
Configuration management for the OpenCage geocode client.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import tomli

import lib.utils as utils

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration file exists but can't be loaded."""


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholders with actual values.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in configuration values.

    Strings, dicts and lists are processed, other values are returned unchanged.
    """
    if isinstance(value, str):
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}", replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


class ConfigManager:
    """Manages configuration loading for the geocode client, dood!

    Main TOML file is optional: API key may come from environment, so missing
    file only produces a warning. Files from config directories are merged
    on top of the main file in sorted order.

    Example config.toml:

        [opencage]
        api-key = "${OPENCAGE_API_KEY}"
        timeout = 10
        language = "en"

        [logging]
        level = "INFO"
        console = true
    """

    def __init__(
        self, configPath: str = "config.toml", configDirs: Optional[List[str]] = None, dotEnvFile: Optional[str] = ".env"
    ):
        """Initialize ConfigManager with config file path and optional config directories."""
        self.configPath = configPath
        self.configDirs = configDirs or []
        if dotEnvFile and Path(dotEnvFile).is_file():
            utils.load_dotenv(path=dotEnvFile)
            logger.debug(f"Loaded environment from {dotEnvFile}")
        self.config = substituteEnvVars(self._loadConfig())

    def _findTomlFilesRecursive(self, directory: str) -> List[Path]:
        """Recursively find all .toml files in a directory, dood!"""
        dirPath = Path(directory)

        if not dirPath.is_dir():
            logger.warning(f"Config directory {directory} does not exist or is not a directory, skipping")
            return []

        tomlFiles = [tomlFile for tomlFile in dirPath.rglob("*.toml") if tomlFile.is_file()]
        for tomlFile in tomlFiles:
            logger.debug(f"Found config file: {tomlFile}")
        return sorted(tomlFiles)  # Sort for consistent ordering

    def _mergeConfigs(self, baseConfig: Dict[str, Any], newConfig: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge two configuration dictionaries, dood!"""
        merged = baseConfig.copy()

        for key, value in newConfig.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self._mergeConfigs(merged[key], value)
            else:
                merged[key] = value

        return merged

    def _loadConfig(self) -> Dict[str, Any]:
        """Load configuration from TOML file and optional config directories.

        Raises:
            ConfigError: if main config file exists but can't be parsed
        """
        config: Dict[str, Any] = {}
        configFile = Path(self.configPath)
        if configFile.exists():
            try:
                with open(configFile, "rb") as f:
                    config = tomli.load(f)
            except (OSError, tomli.TOMLDecodeError) as e:
                raise ConfigError(f"Failed to load configuration {self.configPath}: {e}") from e
            logger.info(f"Loaded main config from {self.configPath}")
        else:
            logger.warning(f"Configuration file {self.configPath} not found, using defaults")

        for configDir in self.configDirs:
            tomlFiles = self._findTomlFilesRecursive(configDir)
            logger.info(f"Found {len(tomlFiles)} .toml files in {configDir}")

            for tomlFile in tomlFiles:
                try:
                    with open(tomlFile, "rb") as f:
                        dirConfig = tomli.load(f)
                except (OSError, tomli.TOMLDecodeError) as e:
                    logger.error(f"Failed to load config file {tomlFile}: {e}")
                    # Continue with other files
                    continue

                config = self._mergeConfigs(config, dirConfig)
                logger.info(f"Merged config from {tomlFile}")

        return config

    def get(self, key: str, default=None) -> Any:
        """Get configuration value by key."""
        return self.config.get(key, default)

    def getLoggingConfig(self) -> Dict[str, Any]:
        """Get logging-specific configuration."""
        return self.get("logging", {})

    def getOpenCageConfig(self) -> Dict[str, Any]:
        """
        Get OpenCage client configuration

        Returns:
            Dict with OpenCage settings:
            - api-key: API key (usually "${OPENCAGE_API_KEY}")
            - base-url: API endpoint URL
            - timeout: HTTP request timeout in seconds
            - user-agent: Client identification string
            - language: Default language for results
        """
        return self.get("opencage", {})
