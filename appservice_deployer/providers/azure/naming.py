"""
Azure resource naming conventions.

Naming Convention:
    - Resource Group: {test_id}-rg
    - App Service Plan: {test_id}-plan
    - Web App: {test_id}-app (lowercase; becomes {name}.azurewebsites.net)

    Azure naming restrictions:
    - Resource Groups: 1-90 chars, alphanumeric, underscores, hyphens, periods
    - App Service Plans: 1-40 chars, alphanumeric and hyphens
    - Web Apps: 2-60 chars, alphanumeric and hyphens, globally unique

Usage:
    from appservice_deployer.providers.azure.naming import AzureNaming

    naming = AzureNaming("appsvc-git-1a2b3c4d")
    rg_name = naming.resource_group()  # "appsvc-git-1a2b3c4d-rg"
"""

import re

WEB_APP_MAX_LENGTH = 60
APP_SERVICE_PLAN_MAX_LENGTH = 40


class AzureNaming:
    """
    Generates consistent Azure resource names for one test run.

    Attributes:
        test_id: The prefix shared by all resources of the run
    """

    def __init__(self, test_id: str):
        if not test_id:
            raise ValueError("test_id is required")
        self._test_id = test_id
        # Web app names become DNS labels
        self._dns_safe_id = re.sub(r'[^a-z0-9-]', '-', test_id.lower()).strip('-')

    @property
    def test_id(self) -> str:
        """Get the test id."""
        return self._test_id

    def resource_group(self) -> str:
        """
        Resource Group name for all test resources.

        Pattern: {test_id}-rg
        """
        return f"{self._test_id}-rg"

    def app_service_plan(self) -> str:
        """
        App Service Plan name.

        Pattern: {test_id}-plan (truncated to 40 chars)
        """
        suffix = "-plan"
        return self._dns_safe_id[:APP_SERVICE_PLAN_MAX_LENGTH - len(suffix)] + suffix

    def web_app(self) -> str:
        """
        Web App name.

        Pattern: {test_id}-app (lowercase, truncated to 60 chars)
        """
        suffix = "-app"
        return self._dns_safe_id[:WEB_APP_MAX_LENGTH - len(suffix)] + suffix

    @staticmethod
    def default_host_name(web_app_name: str) -> str:
        """Public host name of a web app."""
        return f"{web_app_name}.azurewebsites.net"

    @staticmethod
    def scm_host_name(web_app_name: str) -> str:
        """Host name of the app's SCM (Kudu) site that serves its git repository."""
        return f"{web_app_name}.scm.azurewebsites.net"
