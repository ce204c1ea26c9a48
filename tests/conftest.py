"""Shared pytest fixtures."""

from pathlib import Path

import pytest

from configuration import AppConfig
from models.config import Configuration, SpecsConfiguration
from store.data_store import DataStore
from store.principals import CredentialTable, PrincipalDirectory, build_principal_tables

CONFIGURATION_DIRECTORY = Path(__file__).parent / "configuration"
CONFIGURATION_FILE = CONFIGURATION_DIRECTORY / "mockzure.yaml"
SPECS_DIRECTORY = CONFIGURATION_DIRECTORY / "specs"


@pytest.fixture(name="configuration")
def configuration_fixture() -> Configuration:
    """Load the sample configuration used across the test suite.

    The specs directory is replaced with an absolute path so tests do not
    depend on the working directory pytest runs in.

    Returns:
        Configuration: Validated sample configuration.
    """
    cfg = AppConfig()
    cfg.load_configuration(str(CONFIGURATION_FILE))
    return cfg.configuration.model_copy(
        update={"specs": SpecsConfiguration(directory=str(SPECS_DIRECTORY))}
    )


@pytest.fixture(name="principal_tables")
def principal_tables_fixture(
    configuration: Configuration,
) -> tuple[PrincipalDirectory, CredentialTable]:
    """Principal directory and credential table of the sample configuration."""
    return build_principal_tables(configuration.service_accounts)


@pytest.fixture(name="data_store")
def data_store_fixture(
    configuration: Configuration,
    principal_tables: tuple[PrincipalDirectory, CredentialTable],
) -> DataStore:
    """Data store filled with the sample resource groups, VMs and users."""
    principals, _ = principal_tables
    return DataStore(
        resource_groups=configuration.resource_groups,
        vms=configuration.vms,
        users=configuration.users,
        principals=principals,
    )
