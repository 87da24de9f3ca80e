"""
Azure App Service resource tests.

Covers create/destroy/check for the Resource Group, App Service Plan and
Web App, plus SCM basic auth and publishing profile retrieval.
"""

import pytest
from unittest.mock import MagicMock

from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)


# ==========================================
# Fixtures
# ==========================================

@pytest.fixture
def mock_provider():
    """Create a mock AzureProvider for testing."""
    provider = MagicMock()
    provider.subscription_id = "test-subscription-123"
    provider.location = "westeurope"
    provider.naming.scm_host_name.side_effect = lambda name: f"{name}.scm.azurewebsites.net"
    provider.naming.default_host_name.side_effect = lambda name: f"{name}.azurewebsites.net"

    provider.clients = {
        "resource": MagicMock(),
        "web": MagicMock(),
    }
    return provider


@pytest.fixture
def mock_plan():
    plan = MagicMock()
    plan.id = "/subscriptions/test-subscription-123/resourceGroups/appsvc-git-unit-rg/providers/Microsoft.Web/serverfarms/appsvc-git-unit-plan"
    return plan


# ==========================================
# Resource Group
# ==========================================

class TestResourceGroup:

    def test_create_resource_group(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import create_resource_group

        rg = MagicMock()
        mock_provider.clients["resource"].resource_groups.create_or_update.return_value = rg

        result = create_resource_group(mock_provider, test_env)

        assert result is rg
        mock_provider.clients["resource"].resource_groups.create_or_update.assert_called_once_with(
            resource_group_name="appsvc-git-unit-rg",
            parameters={"location": "westeurope"}
        )

    def test_create_reraises_auth_error(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import create_resource_group

        mock_provider.clients["resource"].resource_groups.create_or_update.side_effect = \
            ClientAuthenticationError("denied")

        with pytest.raises(ClientAuthenticationError):
            create_resource_group(mock_provider, test_env)

    def test_destroy_resource_group(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import destroy_resource_group

        destroy_resource_group(mock_provider, test_env)

        mock_provider.clients["resource"].resource_groups.begin_delete.assert_called_once_with("appsvc-git-unit-rg")
        mock_provider.clients["resource"].resource_groups.begin_delete.return_value.result.assert_called_once()

    def test_destroy_handles_not_found(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import destroy_resource_group

        mock_provider.clients["resource"].resource_groups.begin_delete.side_effect = ResourceNotFoundError("Not found")

        destroy_resource_group(mock_provider, test_env)

    def test_destroy_wraps_other_errors(self, mock_provider, test_env):
        from appservice_deployer.core.exceptions import ResourceDeletionError
        from appservice_deployer.providers.azure.app_service import destroy_resource_group

        mock_provider.clients["resource"].resource_groups.begin_delete.side_effect = HttpResponseError("Conflict")

        with pytest.raises(ResourceDeletionError) as exc_info:
            destroy_resource_group(mock_provider, test_env)

        assert exc_info.value.resource_name == "appsvc-git-unit-rg"
        assert exc_info.value.stage == "teardown"

    def test_check_resource_group(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import check_resource_group

        assert check_resource_group(mock_provider, test_env) is True

        mock_provider.clients["resource"].resource_groups.get.side_effect = ResourceNotFoundError("Not found")
        assert check_resource_group(mock_provider, test_env) is False


# ==========================================
# App Service Plan
# ==========================================

class TestAppServicePlan:

    def test_create_app_service_plan(self, mock_provider, test_env, mock_plan):
        from appservice_deployer.providers.azure.app_service import create_app_service_plan

        begin = mock_provider.clients["web"].app_service_plans.begin_create_or_update
        begin.return_value.result.return_value = mock_plan

        result = create_app_service_plan(mock_provider, test_env)

        assert result is mock_plan
        kwargs = begin.call_args.kwargs
        assert kwargs["resource_group_name"] == "appsvc-git-unit-rg"
        assert kwargs["name"] == "appsvc-git-unit-plan"
        plan_model = kwargs["app_service_plan"]
        assert plan_model.location == "westeurope"
        assert plan_model.sku.tier == "Standard"
        assert plan_model.sku.name == "S1"
        assert plan_model.reserved is False

    def test_create_validates_provider(self, test_env):
        from appservice_deployer.providers.azure.app_service import create_app_service_plan

        with pytest.raises(ValueError, match="provider is required"):
            create_app_service_plan(None, test_env)

    def test_create_rejects_bad_pricing_tier(self, mock_provider, test_env):
        import dataclasses
        from appservice_deployer.core.exceptions import ConfigurationError
        from appservice_deployer.providers.azure.app_service import create_app_service_plan

        bad_env = dataclasses.replace(test_env, app_service_pricing_tier="Gold_G1")

        with pytest.raises(ConfigurationError):
            create_app_service_plan(mock_provider, bad_env)
        mock_provider.clients["web"].app_service_plans.begin_create_or_update.assert_not_called()

    def test_create_reraises_http_error(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import create_app_service_plan

        mock_provider.clients["web"].app_service_plans.begin_create_or_update.side_effect = \
            HttpResponseError("Quota exceeded")

        with pytest.raises(HttpResponseError):
            create_app_service_plan(mock_provider, test_env)

    def test_destroy_handles_not_found(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import destroy_app_service_plan

        mock_provider.clients["web"].app_service_plans.delete.side_effect = ResourceNotFoundError("Not found")

        destroy_app_service_plan(mock_provider, test_env)

    def test_check_plan(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import check_app_service_plan

        assert check_app_service_plan(mock_provider, test_env) is True

        mock_provider.clients["web"].app_service_plans.get.side_effect = ResourceNotFoundError("Not found")
        assert check_app_service_plan(mock_provider, test_env) is False


# ==========================================
# Web App
# ==========================================

class TestWebApp:

    def test_create_web_app_with_local_git(self, mock_provider, test_env, mock_plan):
        from appservice_deployer.providers.azure.app_service import create_web_app

        begin = mock_provider.clients["web"].web_apps.begin_create_or_update
        site = MagicMock()
        begin.return_value.result.return_value = site

        result = create_web_app(mock_provider, test_env, mock_plan, php_version="5.6")

        assert result is site
        kwargs = begin.call_args.kwargs
        assert kwargs["name"] == "appsvc-git-unit-app"
        envelope = kwargs["site_envelope"]
        assert envelope.server_farm_id == mock_plan.id
        assert envelope.site_config.scm_type == "LocalGit"
        assert envelope.site_config.php_version == "5.6"
        assert envelope.site_config.python_version is None

    def test_create_web_app_python_runtime(self, mock_provider, test_env, mock_plan):
        from appservice_deployer.providers.azure.app_service import create_web_app

        create_web_app(mock_provider, test_env, mock_plan, python_version="3.4")

        envelope = mock_provider.clients["web"].web_apps.begin_create_or_update.call_args.kwargs["site_envelope"]
        assert envelope.site_config.python_version == "3.4"
        assert envelope.site_config.php_version is None

    def test_create_validates_plan(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import create_web_app

        with pytest.raises(ValueError, match="plan is required"):
            create_web_app(mock_provider, test_env, None)

    def test_destroy_handles_not_found(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import destroy_web_app

        mock_provider.clients["web"].web_apps.delete.side_effect = ResourceNotFoundError("Not found")

        destroy_web_app(mock_provider, test_env)

    def test_check_web_app(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import check_web_app

        assert check_web_app(mock_provider, test_env) is True

        mock_provider.clients["web"].web_apps.get.side_effect = ResourceNotFoundError("Not found")
        assert check_web_app(mock_provider, test_env) is False


# ==========================================
# Publishing
# ==========================================

class TestPublishing:

    def test_enable_scm_basic_auth(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import enable_scm_basic_auth

        enable_scm_basic_auth(mock_provider, test_env)

        kwargs = mock_provider.clients["web"].web_apps.update_scm_allowed.call_args.kwargs
        assert kwargs["name"] == "appsvc-git-unit-app"
        assert kwargs["csm_publishing_access_policies_entity"].allow is True

    def _set_credentials(self, mock_provider, user="$appsvc-git-unit-app", password="s3cret"):
        creds = MagicMock()
        creds.publishing_user_name = user
        creds.publishing_password = password
        begin = mock_provider.clients["web"].web_apps.begin_list_publishing_credentials
        begin.return_value.result.return_value = creds
        return begin

    def test_profile_uses_default_scm_host(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import get_publishing_profile

        self._set_credentials(mock_provider)
        web_app = MagicMock()
        web_app.enabled_host_names = []

        profile = get_publishing_profile(mock_provider, test_env, web_app)

        assert profile.git_url == "https://appsvc-git-unit-app.scm.azurewebsites.net:443/appsvc-git-unit-app.git"
        assert profile.git_username == "$appsvc-git-unit-app"
        assert profile.git_password == "s3cret"
        assert "s3cret" not in repr(profile)

    def test_profile_prefers_enabled_scm_host(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import get_publishing_profile

        self._set_credentials(mock_provider)
        web_app = MagicMock()
        web_app.enabled_host_names = [
            "appsvc-git-unit-app.azurewebsites.net",
            "appsvc-git-unit-app.scm.azurewebsites.us",
        ]

        profile = get_publishing_profile(mock_provider, test_env, web_app)

        assert profile.git_url == "https://appsvc-git-unit-app.scm.azurewebsites.us:443/appsvc-git-unit-app.git"

    def test_profile_retries_on_service_unavailable(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import get_publishing_profile

        begin = self._set_credentials(mock_provider)
        ready = begin.return_value
        begin.side_effect = [
            HttpResponseError("(ServiceUnavailable) 503 site starting"),
            HttpResponseError("(ServiceUnavailable) 503 site starting"),
            ready,
        ]

        profile = get_publishing_profile(mock_provider, test_env, MagicMock(enabled_host_names=[]))

        assert begin.call_count == 3
        assert profile.git_password == "s3cret"

    def test_profile_gives_up_after_max_retries(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import get_publishing_profile

        begin = mock_provider.clients["web"].web_apps.begin_list_publishing_credentials
        begin.side_effect = HttpResponseError("503 Service Unavailable")

        with pytest.raises(HttpResponseError):
            get_publishing_profile(mock_provider, test_env, MagicMock(), max_retries=3)

        assert begin.call_count == 3

    def test_profile_does_not_retry_other_errors(self, mock_provider, test_env):
        from appservice_deployer.providers.azure.app_service import get_publishing_profile

        begin = mock_provider.clients["web"].web_apps.begin_list_publishing_credentials
        begin.side_effect = HttpResponseError("Forbidden")

        with pytest.raises(HttpResponseError):
            get_publishing_profile(mock_provider, test_env, MagicMock())

        assert begin.call_count == 1
