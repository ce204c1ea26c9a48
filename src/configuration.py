"""Configuration loader."""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import yaml

from models.config import (
    AuthorizationConfiguration,
    Configuration,
    IdentityConfiguration,
    ServiceConfiguration,
    SpecsConfiguration,
)

logger = logging.getLogger(__name__)


class LogicError(Exception):
    """Error in application logic."""


class AppConfig:
    """Load and store the configuration.

    One instance is created by the entry point and handed over to the mock
    context; nothing in the service reaches for a global configuration.
    """

    def __init__(self) -> None:
        """Initialize the class instance with no configuration loaded."""
        self._configuration: Optional[Configuration] = None

    def load_configuration(self, filename: str) -> None:
        """Load configuration from YAML or JSON file.

        Files with `.json` extension are parsed as JSON, everything else as
        YAML (which is a superset of JSON anyway).

        Parameters:
            filename (str): Path to the configuration file to load.

        Raises:
            LogicError: If the path points to a directory.
        """
        path = Path(filename)
        if path.is_dir():
            raise LogicError(
                f"configuration path is a directory, not a file: {filename}"
            )
        with open(path, encoding="utf-8") as fin:
            if path.suffix.lower() == ".json":
                config_dict = json.load(fin)
            else:
                config_dict = yaml.safe_load(fin)
        logger.info("Loaded configuration from %s", filename)
        self.init_from_dict(config_dict or {})

    def init_from_dict(self, config_dict: dict[Any, Any]) -> None:
        """Initialize configuration from a dictionary.

        Parameters:
            config_dict (dict[Any, Any]): Mapping of configuration values
            (typically parsed from YAML) to construct a new Configuration
            instance.
        """
        self._configuration = Configuration.model_validate(config_dict)
        logger.info(
            "Configuration contains %d resource groups, %d VMs, %d users, "
            "%d service accounts",
            len(self._configuration.resource_groups),
            len(self._configuration.vms),
            len(self._configuration.users),
            len(self._configuration.service_accounts),
        )

    @property
    def configuration(self) -> Configuration:
        """Return the whole configuration.

        Returns:
            Configuration: The loaded configuration object.

        Raises:
            LogicError: If the configuration has not been loaded.
        """
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration

    @property
    def service_configuration(self) -> ServiceConfiguration:
        """Return service configuration.

        Raises:
            LogicError: If the configuration has not been loaded.
        """
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.service

    @property
    def specs_configuration(self) -> SpecsConfiguration:
        """Return the location of API descriptions.

        Raises:
            LogicError: If the configuration has not been loaded.
        """
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.specs

    @property
    def authorization_configuration(self) -> AuthorizationConfiguration:
        """Return authorization gate configuration.

        Raises:
            LogicError: If the configuration has not been loaded.
        """
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.authorization

    @property
    def identity_configuration(self) -> IdentityConfiguration:
        """Return mock identity provider configuration.

        Raises:
            LogicError: If the configuration has not been loaded.
        """
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration.identity
