import pytest

from appservice_deployer.core.context import TestEnvironment


@pytest.fixture(scope="function", autouse=True)
def mock_env_vars(monkeypatch):
    """Point credential lookups at fake values to prevent accidental cloud calls."""
    monkeypatch.setenv("AZURE_SUBSCRIPTION_ID", "test-subscription-123")
    monkeypatch.setenv("AZURE_TENANT_ID", "test-tenant")
    monkeypatch.setenv("AZURE_CLIENT_ID", "test-client")
    monkeypatch.setenv("AZURE_CLIENT_SECRET", "testing")
    monkeypatch.delenv("APPSERVICE_TEST_CREDENTIALS_FILE", raising=False)
    monkeypatch.delenv("BUILD_TAG", raising=False)


@pytest.fixture(scope="function")
def test_env():
    """
    Create a TestEnvironment for tests.
    """
    return TestEnvironment(
        test_id="appsvc-git-unit",
        azure_location="westeurope",
        azure_resource_group="appsvc-git-unit-rg",
        app_service_plan_name="appsvc-git-unit-plan",
        app_service_pricing_tier="Standard_S1",
        app_service_name="appsvc-git-unit-app",
        mode="DEBUG",
    )


@pytest.fixture(autouse=True)
def mock_sleep(monkeypatch):
    """Skip time.sleep calls to speed up tests."""
    monkeypatch.setattr("time.sleep", lambda x: None)
