"""
App Service git deploy integration suite.

Provisions an Azure resource group, App Service plan and web app, stages a
sample application into a workspace, pushes it to the app's git endpoint and
polls the public URL until the app answers with its marker string.
"""

__version__ = "0.1.0"
