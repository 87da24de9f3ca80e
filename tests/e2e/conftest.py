"""
E2E Test Fixtures.

Provides fixtures for live git deployments to Azure App Service.
These tests deploy REAL resources and incur costs.

Credentials come from config_credentials.json (or the file named by
APPSERVICE_TEST_CREDENTIALS_FILE) or from the AZURE_* environment variables.
Without them every live test is skipped.
"""

import dataclasses

import pytest

from appservice_deployer.core.config_loader import load_azure_credentials, load_test_environment
from appservice_deployer.core.exceptions import ConfigurationError
from appservice_deployer.logger import configure_logger
from appservice_deployer.providers.azure import AzureNaming, AzureProvider


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "live: marks tests as live E2E tests that deploy real resources"
    )


@pytest.fixture(autouse=True)
def mock_env_vars():
    """Live tests need the real environment; override the unit-test fakes."""
    yield


@pytest.fixture(autouse=True)
def mock_sleep():
    """Live polling and retries need real sleeps."""
    yield


@pytest.fixture(scope="session")
def azure_credentials():
    try:
        return load_azure_credentials()
    except ConfigurationError as e:
        pytest.skip(f"Azure credentials not configured: {e}")


@pytest.fixture(scope="session")
def base_test_env():
    """Settings of this run; the test id is random unless APPSERVICE_TEST_ID is set."""
    test_env = load_test_environment()
    configure_logger(test_env.mode)
    return test_env


@pytest.fixture(scope="session")
def azure_provider(azure_credentials, base_test_env):
    provider = AzureProvider()
    provider.initialize_clients(
        azure_credentials,
        base_test_env.test_id,
        base_test_env.azure_location
    )
    return provider


@pytest.fixture
def scenario_env(base_test_env, request):
    """
    TestEnvironment for one app type.

    Each scenario gets its own resource group and web app so a failed
    teardown of one cannot block the next.
    """
    app_type = request.param
    naming = AzureNaming(f"{base_test_env.test_id}-{app_type}")
    return dataclasses.replace(
        base_test_env,
        test_id=naming.test_id,
        azure_resource_group=naming.resource_group(),
        app_service_plan_name=naming.app_service_plan(),
        app_service_name=naming.web_app(),
    )
