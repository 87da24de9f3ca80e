"""
Test run context and configuration classes.

Instead of importing global variables, workflow functions receive these
objects explicitly.

Design Pattern: Dependency Injection
    - Environment values are loaded into TestEnvironment at session start
    - JobContext stands in for the CI job (workspace, env vars, listener)
    - Both are passed explicitly to provisioning and deploy functions
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from appservice_deployer import constants as CONSTANTS


@dataclass(frozen=True)
class TestEnvironment:
    """
    Read-only settings for one integration test run.

    Attributes:
        test_id: Prefix for all resource names of this run
        azure_location: Azure region for the resource group, plan and app
        azure_resource_group: Resource group name
        app_service_plan_name: App Service plan name
        app_service_pricing_tier: Pricing tier as "<Tier>_<Size>", e.g. "Standard_S1"
        app_service_name: Web app name (also the default host name prefix)
        mode: Run mode ("DEBUG" enables debug logging)
    """

    # Keep pytest from collecting this class
    __test__ = False

    test_id: str
    azure_location: str
    azure_resource_group: str
    app_service_plan_name: str
    app_service_pricing_tier: str
    app_service_name: str
    mode: str = "INFO"


@dataclass(frozen=True)
class PublishingProfile:
    """
    Git publishing credentials of a web app.

    Attributes:
        git_url: HTTPS URL of the app's git repository on the SCM site
        git_username: Publishing user name (e.g. "$my-app")
        git_password: Publishing password
    """

    git_url: str
    git_username: str
    git_password: str

    def __repr__(self) -> str:
        return (
            f"PublishingProfile(git_url={self.git_url!r}, "
            f"git_username={self.git_username!r}, git_password='***')"
        )


@dataclass
class JobContext:
    """
    The CI job a deploy command runs in.

    Attributes:
        workspace: Directory holding the files to deploy
        env: Build environment variables (BUILD_TAG etc.)
        task_listener: Logger that receives the command's build output
    """

    workspace: Path
    env: Dict[str, str] = field(default_factory=dict)
    task_listener: logging.Logger = field(
        default_factory=lambda: logging.getLogger("appservice_deployer.job")
    )

    def env_vars(self) -> Dict[str, str]:
        """Build environment merged over the process environment."""
        merged = dict(os.environ)
        merged.update(self.env)
        return merged

    @classmethod
    def for_workspace(cls, workspace: Path, build_tag: Optional[str] = None) -> "JobContext":
        """Create a job context whose only build variable is BUILD_TAG."""
        return cls(
            workspace=Path(workspace),
            env={"BUILD_TAG": build_tag or CONSTANTS.DEFAULT_BUILD_TAG},
        )
