"""
Configuration loading utilities.

This module resolves the Azure service principal and the test environment
settings for an integration run.

Credential Resolution Order:
    1. Explicit credentials file argument
    2. File named by APPSERVICE_TEST_CREDENTIALS_FILE
    3. config_credentials.json in the current directory (if present)
    4. AZURE_SUBSCRIPTION_ID / AZURE_TENANT_ID / AZURE_CLIENT_ID /
       AZURE_CLIENT_SECRET environment variables

Usage:
    from appservice_deployer.core.config_loader import (
        load_azure_credentials, load_test_environment
    )

    credentials = load_azure_credentials()
    test_env = load_test_environment()
"""

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from appservice_deployer import constants as CONSTANTS
from appservice_deployer.providers.azure.naming import AzureNaming
from .context import TestEnvironment
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def _load_json_file(file_path: Path) -> Dict[str, Any]:
    """
    Load a JSON file and return its contents as a dictionary.

    Raises:
        ConfigurationError: If the file is missing or has invalid JSON
    """
    if not file_path.exists():
        raise ConfigurationError(
            "Credentials file not found",
            config_file=str(file_path)
        )

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Invalid JSON in credentials file: {e}",
            config_file=str(file_path)
        )


def _resolve_credentials_path(
    credentials_path: Optional[Path],
    environ: Mapping[str, str]
) -> Tuple[Optional[Path], bool]:
    """Return the credentials file to read and whether it was asked for explicitly."""
    if credentials_path is not None:
        return Path(credentials_path), True
    if environ.get(CONSTANTS.ENV_CREDENTIALS_FILE):
        return Path(environ[CONSTANTS.ENV_CREDENTIALS_FILE]), True
    default_path = Path.cwd() / CONSTANTS.CONFIG_CREDENTIALS_FILE
    if default_path.exists():
        return default_path, False
    return None, False


def load_azure_credentials(
    credentials_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """
    Load the Azure service principal.

    The file's "azure" block wins when it names a subscription. Otherwise the
    standard AZURE_* environment variables are used.

    Args:
        credentials_path: Optional path to a config_credentials.json file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Dictionary with azure_subscription_id and, when available,
        azure_tenant_id, azure_client_id and azure_client_secret

    Raises:
        ConfigurationError: If a credentials file is unreadable or malformed, or no
            subscription ID can be found
    """
    environ = os.environ if environ is None else environ
    path, explicit = _resolve_credentials_path(credentials_path, environ)

    if path is not None:
        data = _load_json_file(path)
        azure_creds = data.get("azure", {}) if isinstance(data, dict) else None
        if not isinstance(azure_creds, dict):
            raise ConfigurationError(
                "Expected a JSON object with an 'azure' object block",
                config_file=str(path)
            )
        if azure_creds.get("azure_subscription_id"):
            logger.info(f"Using Azure credentials from {path.name}")
            return {
                key: azure_creds[key]
                for key in CONSTANTS.AZURE_CREDENTIAL_ENV_VARS
                if azure_creds.get(key)
            }
        if explicit:
            raise ConfigurationError(
                "Missing required credential 'azure_subscription_id' in 'azure' block",
                config_file=str(path)
            )

    credentials = {
        key: environ[var]
        for key, var in CONSTANTS.AZURE_CREDENTIAL_ENV_VARS.items()
        if environ.get(var)
    }
    if "azure_subscription_id" not in credentials:
        raise ConfigurationError(
            "Azure credentials not configured. Set AZURE_SUBSCRIPTION_ID "
            f"(and a service principal) or provide {CONSTANTS.CONFIG_CREDENTIALS_FILE}."
        )

    logger.info("Using Azure credentials from environment variables")
    return credentials


def parse_pricing_tier(value: str) -> Tuple[str, str]:
    """
    Split a pricing tier into its SKU tier and SKU name.

    Example:
        >>> parse_pricing_tier("Standard_S1")
        ("Standard", "S1")

    Raises:
        ConfigurationError: If the value is not "<Tier>_<Size>" with a known tier
    """
    tier, sep, size = (value or "").strip().partition("_")
    if not sep or not tier or not size:
        raise ConfigurationError(
            f"Invalid pricing tier '{value}'. Expected '<Tier>_<Size>', e.g. 'Standard_S1'."
        )

    canonical = CONSTANTS.PRICING_TIERS.get(tier.lower())
    if canonical is None:
        raise ConfigurationError(
            f"Unknown pricing tier '{tier}'. "
            f"Available: {sorted(CONSTANTS.PRICING_TIERS.values())}"
        )
    return canonical, size


def generate_test_id(prefix: str = CONSTANTS.DEFAULT_TEST_ID_PREFIX) -> str:
    """Random test id; web app host names are global so runs must not collide."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def load_test_environment(environ: Optional[Mapping[str, str]] = None) -> TestEnvironment:
    """
    Build the TestEnvironment for this run from environment variables.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        TestEnvironment with names derived from the test id

    Raises:
        ConfigurationError: If the pricing tier is invalid
    """
    environ = os.environ if environ is None else environ

    test_id = environ.get(CONSTANTS.ENV_TEST_ID) or generate_test_id()
    pricing_tier = environ.get(CONSTANTS.ENV_PRICING_TIER) or CONSTANTS.DEFAULT_PRICING_TIER
    # Fail before any resource is created
    parse_pricing_tier(pricing_tier)

    naming = AzureNaming(test_id)
    return TestEnvironment(
        test_id=test_id,
        azure_location=environ.get(CONSTANTS.ENV_LOCATION) or CONSTANTS.DEFAULT_LOCATION,
        azure_resource_group=naming.resource_group(),
        app_service_plan_name=naming.app_service_plan(),
        app_service_pricing_tier=pricing_tier,
        app_service_name=naming.web_app(),
        mode=environ.get(CONSTANTS.ENV_MODE) or "INFO",
    )
