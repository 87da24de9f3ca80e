"""
Core module for the App Service git deploy suite.

This package contains the foundational pieces of the workflow:
- context: TestEnvironment, PublishingProfile and JobContext
- config_loader: Credential and test environment loading
- exceptions: Custom exception hierarchy
"""

from .exceptions import (
    DeploymentError,
    ConfigurationError,
    ResourceCreationError,
    ResourceDeletionError,
    StagingError,
    ReadinessTimeoutError,
)

from .context import (
    TestEnvironment,
    PublishingProfile,
    JobContext,
)

__all__ = [
    # Exceptions
    "DeploymentError",
    "ConfigurationError",
    "ResourceCreationError",
    "ResourceDeletionError",
    "StagingError",
    "ReadinessTimeoutError",
    # Context
    "TestEnvironment",
    "PublishingProfile",
    "JobContext",
]
