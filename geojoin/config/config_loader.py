"""
Configuration loader for the GeoJoin block/submission overlay system.

This module provides the ConfigLoader class that handles loading and validating
JSON configuration files for multi-environment deployments.
"""

import json
import os
from pathlib import Path
from typing import Dict, Any, Optional
from functools import lru_cache

from ..exceptions import GeoJoinConfigurationError, GeoJoinValidationError
from ..utils import get_logger


REQUIRED_SECTIONS = ["logging", "join"]


class ConfigLoader:
    """
    Configuration loader and validator for the GeoJoin system.

    This class handles loading environment-specific configuration from
    ``environment_config.json``, merging the ``shared`` section into each
    environment, validating required sections, and providing access to
    individual configuration sections.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize the configuration loader.

        Args:
            config_dir: Directory containing configuration files (defaults to 'config/')
        """
        self.logger = get_logger(__name__)
        self.config_dir = Path(config_dir) if config_dir else Path("config")

    @lru_cache(maxsize=2)
    def load_environment_config(self, environment: str) -> Dict[str, Any]:
        """
        Load configuration for a specific environment.

        Args:
            environment: Environment name (development/production)

        Returns:
            Dictionary containing environment-specific configuration merged with shared config

        Raises:
            GeoJoinConfigurationError: If configuration cannot be loaded or validated
        """
        try:
            env_config_path = self.config_dir / "environment_config.json"

            if not env_config_path.exists():
                raise GeoJoinConfigurationError(
                    f"Environment configuration file not found: {env_config_path}"
                )

            with open(env_config_path, 'r') as f:
                config_data = json.load(f)

            self._validate_environment_config(config_data, environment)

            env_config = self._merge_shared_config(
                config_data.get("shared", {}),
                config_data["environments"][environment]
            )

            # Add validation metadata
            env_config["_validation"] = config_data.get("validation", {})

            self.logger.info(f"Loaded configuration for environment: {environment}")
            return env_config

        except json.JSONDecodeError as e:
            raise GeoJoinConfigurationError(
                f"Invalid JSON in environment configuration: {str(e)}"
            ) from e
        except Exception as e:
            raise GeoJoinConfigurationError(
                f"Failed to load environment configuration: {str(e)}"
            ) from e

    def get_config(self, environment: str, section: str) -> Dict[str, Any]:
        """
        Get one configuration section for an environment.

        Args:
            environment: Environment name
            section: Section key (e.g. 'join', 'logging')

        Returns:
            Copy of the section dictionary

        Raises:
            GeoJoinConfigurationError: If the section is not present
        """
        env_config = self.load_environment_config(environment)

        if section not in env_config:
            raise GeoJoinConfigurationError(
                f"Section '{section}' not found in {environment} configuration",
                {"environment": environment}
            )

        return dict(env_config[section])

    def get_join_settings(self, environment: str) -> Dict[str, Any]:
        """Get the raw join engine settings for an environment."""
        return self.get_config(environment, "join")

    def get_logging_config(self, environment: str) -> Dict[str, Any]:
        """Get the logging settings for an environment."""
        return self.get_config(environment, "logging")

    def validate_environment_variables(self, environment: str) -> None:
        """
        Validate that required environment variables are set.

        Args:
            environment: Environment name to validate

        Raises:
            GeoJoinValidationError: If required environment variables are missing
        """
        env_config = self.load_environment_config(environment)
        required_vars = env_config.get("_validation", {}).get("required_environment_variables", [])

        missing_vars = []
        for var in required_vars:
            if not os.getenv(var):
                missing_vars.append(var)

        if missing_vars:
            raise GeoJoinValidationError(
                f"Missing required environment variables: {', '.join(missing_vars)}"
            )

        self.logger.info(f"Environment variables validated for: {environment}")

    @staticmethod
    def _merge_shared_config(shared_config: Dict[str, Any],
                             env_config: Dict[str, Any]) -> Dict[str, Any]:
        """Merge shared sections under environment sections.

        Dictionary sections are merged key by key with environment values
        winning; any other shared value is only used when the environment
        does not define it.
        """
        merged = {key: (dict(value) if isinstance(value, dict) else value)
                  for key, value in env_config.items()}

        for key, shared_value in shared_config.items():
            env_value = merged.get(key)
            if isinstance(shared_value, dict) and isinstance(env_value, dict):
                section = dict(shared_value)
                section.update(env_value)
                merged[key] = section
            elif key not in merged:
                merged[key] = dict(shared_value) if isinstance(shared_value, dict) else shared_value

        return merged

    def _validate_environment_config(self, config_data: Dict[str, Any], environment: str) -> None:
        """
        Validate environment configuration structure.

        Args:
            config_data: Configuration data to validate
            environment: Environment name to validate

        Raises:
            GeoJoinValidationError: If configuration is invalid
        """
        if "environments" not in config_data:
            raise GeoJoinValidationError("Missing 'environments' key in configuration")

        if environment not in config_data["environments"]:
            available_envs = list(config_data["environments"].keys())
            raise GeoJoinValidationError(
                f"Environment '{environment}' not found. Available: {available_envs}"
            )

        env_config = config_data["environments"][environment]
        shared_config = config_data.get("shared", {})

        # Sections may live in either the environment or the shared block
        missing_sections = [
            section for section in REQUIRED_SECTIONS
            if section not in env_config and section not in shared_config
        ]
        if missing_sections:
            raise GeoJoinValidationError(
                f"Missing required sections in {environment} configuration (including shared): {missing_sections}"
            )

    def clear_cache(self) -> None:
        """Clear the configuration cache."""
        self.load_environment_config.cache_clear()
        self.logger.info("Configuration cache cleared")
