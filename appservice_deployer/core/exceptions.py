"""
Custom exceptions for the App Service git deploy suite.

This module defines a hierarchy of exceptions used throughout the
provision → stage → deploy → verify workflow to provide clear, actionable
error messages.

Exception Hierarchy:
    DeploymentError (base)
    ├── ConfigurationError - Credentials or run settings unusable
    ├── ResourceCreationError - Cloud resource missing after creation
    ├── ResourceDeletionError - Failed to delete cloud resource
    ├── StagingError - Sample files could not be staged into the workspace
    └── ReadinessTimeoutError - Deployed app never served the expected content
"""

from typing import Optional


class DeploymentError(Exception):
    """
    Root of every error raised by the deploy workflow.

    Attributes:
        message: What went wrong, without the stage suffix
        stage: Optional workflow stage where the error occurred
    """

    def __init__(self, message: str, stage: Optional[str] = None):
        self.message = message
        self.stage = stage

        if stage:
            full_message = f"{message} [stage={stage}]"
        else:
            full_message = message

        super().__init__(full_message)


class ConfigurationError(DeploymentError):
    """
    Credentials or run settings are missing or malformed.

    Raised when:
    - The credentials file is missing or has invalid JSON
    - No subscription ID is available from file or environment
    - The pricing tier is not of the form "<Tier>_<Size>"

    Example:
        >>> load_azure_credentials(Path("nonexistent.json"))
        ConfigurationError: Credentials file not found (file: nonexistent.json)
    """

    def __init__(self, message: str, config_file: Optional[str] = None):
        self.config_file = config_file
        if config_file:
            message = f"{message} (file: {config_file})"
        super().__init__(message, stage="configuration")


class ResourceCreationError(DeploymentError):
    """
    A provisioning call failed or returned no resource handle.

    Also raised when the management API returns no handle for a resource
    that was just created, which fails the scenario before staging.

    Attributes:
        resource_type: Type of resource (e.g., "resource_group", "web_app")
        resource_name: Azure name of the resource
        original_error: The underlying SDK exception, if any
    """

    def __init__(
        self,
        resource_type: str,
        resource_name: str,
        original_error: Optional[Exception] = None
    ):
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.original_error = original_error

        message = f"Failed to create {resource_type} '{resource_name}'"
        if original_error:
            message += f": {str(original_error)}"
        else:
            message += ": no resource returned"

        super().__init__(message, stage="provisioning")


class ResourceDeletionError(DeploymentError):
    """
    A teardown delete failed for a reason other than "not found".

    Attributes:
        resource_type: Type of resource (e.g., "resource_group")
        resource_name: Azure name of the resource
        original_error: The SDK exception that caused the failure
    """

    def __init__(
        self,
        resource_type: str,
        resource_name: str,
        original_error: Optional[Exception] = None
    ):
        self.resource_type = resource_type
        self.resource_name = resource_name
        self.original_error = original_error

        message = f"Failed to delete {resource_type} '{resource_name}'"
        if original_error:
            message += f": {str(original_error)}"

        super().__init__(message, stage="teardown")


class StagingError(DeploymentError):
    """Raised when sample application files cannot be staged."""

    def __init__(self, message: str):
        super().__init__(message, stage="staging")


class ReadinessTimeoutError(DeploymentError):
    """
    Raised when a deployed app does not serve the expected content in time.

    Attributes:
        url: The polled URL
        elapsed_seconds: How long polling ran before giving up
        expected_content: The marker string that never appeared
    """

    def __init__(self, url: str, elapsed_seconds: float, expected_content: str):
        self.url = url
        self.elapsed_seconds = elapsed_seconds
        self.expected_content = expected_content
        message = (
            f"Timeout: {url} did not return '{expected_content}' "
            f"after {elapsed_seconds:.0f}s"
        )
        super().__init__(message, stage="verify")
