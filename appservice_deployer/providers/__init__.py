"""
Cloud provider implementations.

Only Azure App Service is targeted; see providers.azure.
"""
