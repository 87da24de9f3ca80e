"""
Azure Provider package.

Provides the AzureProvider (SDK clients + naming) and the App Service
resource functions used by the deploy workflow.
"""

from .provider import AzureProvider
from .naming import AzureNaming

__all__ = ["AzureProvider", "AzureNaming"]
