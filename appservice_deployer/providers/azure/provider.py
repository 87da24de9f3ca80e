"""
Azure provider holding the management clients of one test run.

Two clients are enough for a git deploy scenario:
    - "resource": ResourceManagementClient (resource groups)
    - "web": WebSiteManagementClient (plans, web apps, publishing)

Usage:
    provider = AzureProvider()
    provider.initialize_clients(credentials, test_env.test_id, test_env.azure_location)
    provider.clients["web"].web_apps.get(rg_name, app_name)
"""

from typing import Any, Dict, Optional

from appservice_deployer.providers.azure.naming import AzureNaming

_NOT_INITIALIZED = "AzureProvider is not initialized; call initialize_clients() first."


class AzureProvider:
    """
    SDK clients, subscription, region and naming for one test run.

    Attributes:
        name: Provider identifier ("azure")
    """

    name: str = "azure"

    def __init__(self):
        self._subscription_id = ""
        self._location = ""
        self._naming: Optional[AzureNaming] = None
        self._clients: Dict[str, Any] = {}
        self._initialized = False

    @property
    def subscription_id(self) -> str:
        return self._subscription_id

    @property
    def location(self) -> str:
        return self._location

    @property
    def naming(self) -> AzureNaming:
        if self._naming is None:
            raise RuntimeError(_NOT_INITIALIZED)
        return self._naming

    @property
    def clients(self) -> Dict[str, Any]:
        if not self._initialized:
            raise RuntimeError(_NOT_INITIALIZED)
        return self._clients

    def initialize_clients(self, credentials: dict, test_id: str, location: str) -> None:
        """
        Authenticate and create the management clients.

        A service principal is used when tenant, client id and secret are all
        present; otherwise DefaultAzureCredential picks up the ambient login
        (Azure CLI, managed identity, AZURE_* variables).

        Args:
            credentials: Output of load_azure_credentials()
            test_id: Prefix for resource names of this run
            location: Azure region, e.g. "westeurope"

        Raises:
            ValueError: If the subscription id or location is missing
        """
        subscription_id = credentials.get("azure_subscription_id")
        if not subscription_id:
            raise ValueError(
                "Missing required credential 'azure_subscription_id' "
                "(config_credentials.json or AZURE_SUBSCRIPTION_ID)."
            )
        if not location:
            raise ValueError("location is required")

        self._subscription_id = subscription_id
        self._location = location
        self._naming = AzureNaming(test_id)

        self._create_clients(self._build_credential(credentials))
        self._initialized = True

    @staticmethod
    def _build_credential(credentials: dict) -> Any:
        from azure.identity import ClientSecretCredential, DefaultAzureCredential

        tenant = credentials.get("azure_tenant_id")
        client = credentials.get("azure_client_id")
        secret = credentials.get("azure_client_secret")
        if tenant and client and secret:
            return ClientSecretCredential(tenant_id=tenant, client_id=client, client_secret=secret)
        return DefaultAzureCredential()

    def _create_clients(self, credential: Any) -> None:
        from azure.mgmt.resource.resources import ResourceManagementClient
        from azure.mgmt.web import WebSiteManagementClient

        self._clients = {
            "resource": ResourceManagementClient(credential=credential, subscription_id=self._subscription_id),
            "web": WebSiteManagementClient(credential=credential, subscription_id=self._subscription_id),
        }
