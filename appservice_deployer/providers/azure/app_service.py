"""
Azure App Service resource management.

This module contains functions to create/destroy/check the Azure resources a
git deployment scenario needs.

Resources managed:
    - Resource Group: Container for all test resources
    - App Service Plan: Windows plan with the configured pricing tier
    - Web App: LocalGit-enabled site, optionally with a PHP or Python runtime

Deployment Order:
    1. Resource Group (must be first)
    2. App Service Plan
    3. Web App
    4. SCM Basic Auth + Publishing Profile (needed for git push)

Critical Requirements:
    - Every resource has a create/destroy/check triplet
    - No silent fallbacks: SDK errors are logged with context and re-raised
"""

import logging
import time
from typing import Any, Optional, TYPE_CHECKING

from azure.core.exceptions import (
    AzureError,
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)

from appservice_deployer.core.config_loader import parse_pricing_tier
from appservice_deployer.core.context import PublishingProfile
from appservice_deployer.core.exceptions import ResourceDeletionError

if TYPE_CHECKING:
    from appservice_deployer.core.context import TestEnvironment
    from appservice_deployer.providers.azure.provider import AzureProvider

logger = logging.getLogger(__name__)


# ==========================================
# 1. Resource Group
# ==========================================

def create_resource_group(provider: 'AzureProvider', test_env: 'TestEnvironment') -> Any:
    """
    Create the Resource Group for the test run.

    Args:
        provider: Azure Provider instance with initialized clients
        test_env: Test environment with resource group name and region

    Returns:
        The ResourceGroup returned by the management API

    Raises:
        azure.core.exceptions.HttpResponseError: If creation fails
    """
    rg_name = test_env.azure_resource_group
    location = test_env.azure_location

    logger.info(f"Creating Resource Group: {rg_name} in {location}")

    try:
        # Resource Groups are idempotent - create_or_update handles existing RGs
        resource_group = provider.clients["resource"].resource_groups.create_or_update(
            resource_group_name=rg_name,
            parameters={"location": location}
        )
        logger.info(f"✓ Resource Group created: {rg_name}")
        return resource_group
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED creating Resource Group: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to create Resource Group: {e.status_code} - {e.message}")
        raise
    except AzureError as e:
        logger.error(f"Azure error creating Resource Group: {type(e).__name__}: {e}")
        raise


def destroy_resource_group(provider: 'AzureProvider', test_env: 'TestEnvironment') -> None:
    """
    Delete the Resource Group and ALL resources within it.

    Args:
        provider: Azure Provider instance
        test_env: Test environment naming the resource group

    Raises:
        ResourceDeletionError: If the delete call fails for any reason but
            the group already being gone
    """
    rg_name = test_env.azure_resource_group

    logger.info(f"Deleting Resource Group: {rg_name}")

    try:
        # begin_delete returns a poller for async operation
        poller = provider.clients["resource"].resource_groups.begin_delete(rg_name)
        poller.result()
        logger.info(f"✓ Resource Group deleted: {rg_name}")
    except ResourceNotFoundError:
        logger.info(f"Resource Group already deleted: {rg_name}")
    except AzureError as e:
        logger.error(f"Failed to delete Resource Group: {type(e).__name__}: {e}")
        raise ResourceDeletionError("resource_group", rg_name, e) from e


def check_resource_group(provider: 'AzureProvider', test_env: 'TestEnvironment') -> bool:
    """
    Check if the Resource Group exists.

    Returns:
        True if the Resource Group exists, False otherwise
    """
    rg_name = test_env.azure_resource_group

    try:
        provider.clients["resource"].resource_groups.get(rg_name)
        logger.info(f"✓ Resource Group exists: {rg_name}")
        return True
    except ResourceNotFoundError:
        logger.info(f"✗ Resource Group not found: {rg_name}")
        return False


# ==========================================
# 2. App Service Plan
# ==========================================

def create_app_service_plan(provider: 'AzureProvider', test_env: 'TestEnvironment') -> Any:
    """
    Create the Windows App Service Plan.

    Args:
        provider: Initialized AzureProvider with clients
        test_env: Test environment with plan name, region and pricing tier

    Returns:
        The AppServicePlan returned by the management API

    Raises:
        ValueError: If provider is None
        ConfigurationError: If the pricing tier is invalid
        HttpResponseError: If creation fails
        ClientAuthenticationError: If permission denied
    """
    from azure.mgmt.web.models import AppServicePlan, SkuDescription

    if provider is None:
        raise ValueError("provider is required")

    rg_name = test_env.azure_resource_group
    plan_name = test_env.app_service_plan_name
    tier, sku_name = parse_pricing_tier(test_env.app_service_pricing_tier)

    logger.info(f"Creating App Service Plan: {plan_name} ({tier} {sku_name}, Windows)")

    try:
        poller = provider.clients["web"].app_service_plans.begin_create_or_update(
            resource_group_name=rg_name,
            name=plan_name,
            app_service_plan=AppServicePlan(
                location=test_env.azure_location,
                sku=SkuDescription(name=sku_name, tier=tier),
                kind="app",
                reserved=False  # Windows
            )
        )
        plan = poller.result()
        logger.info(f"✓ App Service Plan created: {plan_name}")
        return plan
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED creating App Service Plan: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to create App Service Plan: {e.status_code} - {e.message}")
        raise
    except AzureError as e:
        logger.error(f"Azure error creating App Service Plan: {type(e).__name__}: {e}")
        raise


def destroy_app_service_plan(provider: 'AzureProvider', test_env: 'TestEnvironment') -> None:
    """
    Delete the App Service Plan.

    Raises:
        ValueError: If provider is None
        ClientAuthenticationError: If permission denied
    """
    if provider is None:
        raise ValueError("provider is required")

    rg_name = test_env.azure_resource_group
    plan_name = test_env.app_service_plan_name

    logger.info(f"Deleting App Service Plan: {plan_name}")

    try:
        provider.clients["web"].app_service_plans.delete(
            resource_group_name=rg_name,
            name=plan_name
        )
        logger.info(f"✓ App Service Plan deleted: {plan_name}")
    except ResourceNotFoundError:
        logger.info(f"App Service Plan already deleted: {plan_name}")
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED deleting App Service Plan: {e.message}")
        raise
    except AzureError as e:
        logger.error(f"Azure error deleting App Service Plan: {type(e).__name__}: {e}")
        raise


def check_app_service_plan(provider: 'AzureProvider', test_env: 'TestEnvironment') -> bool:
    """
    Check if the App Service Plan exists.

    Returns:
        True if the App Service Plan exists, False otherwise
    """
    if provider is None:
        raise ValueError("provider is required")

    rg_name = test_env.azure_resource_group
    plan_name = test_env.app_service_plan_name

    try:
        provider.clients["web"].app_service_plans.get(
            resource_group_name=rg_name,
            name=plan_name
        )
        logger.info(f"✓ App Service Plan exists: {plan_name}")
        return True
    except ResourceNotFoundError:
        logger.info(f"✗ App Service Plan not found: {plan_name}")
        return False


# ==========================================
# 3. Web App
# ==========================================

def create_web_app(
    provider: 'AzureProvider',
    test_env: 'TestEnvironment',
    plan: Any,
    php_version: Optional[str] = None,
    python_version: Optional[str] = None
) -> Any:
    """
    Create the Web App on an existing Windows App Service Plan.

    The site is created with LocalGit source control so that the git deploy
    command can push to its SCM repository.

    Args:
        provider: Initialized AzureProvider with clients
        test_env: Test environment with resource group, region and app name
        plan: The AppServicePlan the app runs on (its id is used)
        php_version: Optional PHP runtime version (e.g., "5.6")
        python_version: Optional Python runtime version (e.g., "3.4")

    Returns:
        The Site returned by the management API

    Raises:
        ValueError: If provider or plan is None
        HttpResponseError: If creation fails
        ClientAuthenticationError: If permission denied
    """
    from azure.mgmt.web.models import Site, SiteConfig

    if provider is None:
        raise ValueError("provider is required")
    if plan is None:
        raise ValueError("plan is required")

    rg_name = test_env.azure_resource_group
    app_name = test_env.app_service_name

    runtime = []
    if php_version:
        runtime.append(f"PHP {php_version}")
    if python_version:
        runtime.append(f"Python {python_version}")
    logger.info(f"Creating Web App: {app_name} ({', '.join(runtime) or 'default runtime'})")

    site_config = SiteConfig(
        scm_type="LocalGit",
        php_version=php_version,
        python_version=python_version,
    )

    try:
        poller = provider.clients["web"].web_apps.begin_create_or_update(
            resource_group_name=rg_name,
            name=app_name,
            site_envelope=Site(
                location=test_env.azure_location,
                server_farm_id=plan.id,
                site_config=site_config,
                https_only=True,
                kind="app"
            )
        )
        web_app = poller.result()
        logger.info(f"✓ Web App created: {app_name}")
        return web_app
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED creating Web App: {e.message}")
        raise
    except HttpResponseError as e:
        logger.error(f"Failed to create Web App: {e.status_code} - {e.message}")
        raise
    except AzureError as e:
        logger.error(f"Azure error creating Web App: {type(e).__name__}: {e}")
        raise


def destroy_web_app(provider: 'AzureProvider', test_env: 'TestEnvironment') -> None:
    """Delete the Web App."""
    if provider is None:
        raise ValueError("provider is required")

    rg_name = test_env.azure_resource_group
    app_name = test_env.app_service_name

    logger.info(f"Deleting Web App: {app_name}")

    try:
        provider.clients["web"].web_apps.delete(
            resource_group_name=rg_name,
            name=app_name
        )
        logger.info(f"✓ Web App deleted: {app_name}")
    except ResourceNotFoundError:
        logger.info(f"Web App already deleted: {app_name}")
    except ClientAuthenticationError as e:
        logger.error(f"PERMISSION DENIED deleting Web App: {e.message}")
        raise
    except AzureError as e:
        logger.error(f"Azure error deleting Web App: {type(e).__name__}: {e}")
        raise


def check_web_app(provider: 'AzureProvider', test_env: 'TestEnvironment') -> bool:
    """
    Check if the Web App exists.

    Returns:
        True if the Web App exists, False otherwise
    """
    if provider is None:
        raise ValueError("provider is required")

    rg_name = test_env.azure_resource_group
    app_name = test_env.app_service_name

    try:
        provider.clients["web"].web_apps.get(
            resource_group_name=rg_name,
            name=app_name
        )
        logger.info(f"✓ Web App exists: {app_name}")
        return True
    except ResourceNotFoundError:
        logger.info(f"✗ Web App not found: {app_name}")
        return False


# ==========================================
# 4. Publishing (SCM Basic Auth + Credentials)
# ==========================================

def enable_scm_basic_auth(provider: 'AzureProvider', test_env: 'TestEnvironment') -> None:
    """
    Enable SCM Basic Auth Publishing for the Web App.

    New sites have SCM Basic Auth disabled by default, and git push over
    HTTPS authenticates with the basic publishing credentials.

    Note:
        Requires 'Microsoft.Web/sites/basicPublishingCredentialsPolicies/write' permission.
    """
    from azure.mgmt.web.models import CsmPublishingCredentialsPoliciesEntity

    rg_name = test_env.azure_resource_group
    app_name = test_env.app_service_name

    logger.info(f"  Enabling SCM Basic Auth for {app_name}...")
    try:
        provider.clients["web"].web_apps.update_scm_allowed(
            resource_group_name=rg_name,
            name=app_name,
            csm_publishing_access_policies_entity=CsmPublishingCredentialsPoliciesEntity(allow=True)
        )
        logger.info("  ✓ SCM Basic Auth enabled")
    except AzureError as e:
        logger.error(f"Failed to enable SCM Basic Auth: {e}")
        raise


def _scm_host_name(provider: 'AzureProvider', web_app: Any, app_name: str) -> str:
    """SCM host from the site's enabled host names, else the default pattern."""
    for host_name in getattr(web_app, "enabled_host_names", None) or []:
        if ".scm." in host_name:
            return host_name
    return provider.naming.scm_host_name(app_name)


def get_publishing_profile(
    provider: 'AzureProvider',
    test_env: 'TestEnvironment',
    web_app: Any,
    max_retries: int = 10,
    retry_delay: int = 30
) -> PublishingProfile:
    """
    Get the git publishing profile of the Web App with retry logic.

    The list_publishing_credentials API can fail with ServiceUnavailable (503)
    while the site is still initializing. This function retries until the
    credentials are available.

    Args:
        provider: Initialized AzureProvider with clients
        test_env: Test environment with resource group and app name
        web_app: The Site returned by create_web_app
        max_retries: Maximum retry attempts (default 10, ~5 min with 30s delay)
        retry_delay: Seconds to wait between retries (default 30)

    Returns:
        PublishingProfile with the git URL and basic credentials

    Raises:
        HttpResponseError: If credentials cannot be retrieved after all retries
    """
    rg_name = test_env.azure_resource_group
    app_name = test_env.app_service_name

    for attempt in range(1, max_retries + 1):
        try:
            creds = provider.clients["web"].web_apps.begin_list_publishing_credentials(
                resource_group_name=rg_name,
                name=app_name
            ).result()
            break
        except HttpResponseError as e:
            error_str = str(e)
            # Retry on ServiceUnavailable while the site is starting up
            if ("ServiceUnavailable" in error_str or "503" in error_str) and attempt < max_retries:
                logger.warning(
                    f"  Web App not ready (attempt {attempt}/{max_retries}), "
                    f"waiting {retry_delay}s..."
                )
                time.sleep(retry_delay)
                continue
            logger.error(f"Failed to get publishing credentials: {e}")
            raise
    else:
        raise HttpResponseError(
            f"Failed to get publishing credentials for {app_name} after {max_retries} attempts"
        )

    scm_host = _scm_host_name(provider, web_app, app_name)
    git_url = f"https://{scm_host}:443/{app_name}.git"
    logger.info(f"  ✓ Publishing profile ready for {app_name} ({git_url})")

    return PublishingProfile(
        git_url=git_url,
        git_username=creds.publishing_user_name,
        git_password=creds.publishing_password,
    )
