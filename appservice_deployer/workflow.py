"""
Provision → stage → deploy → verify workflow for one sample app.

Stages:
    1. Environment setup: Resource Group + App Service Plan
    2. Target provisioning: Web App (+ SCM basic auth, publishing profile)
    3. Payload staging: sample files copied into the workspace
    4. Deploy & verify: GitDeployCommand, then readiness polling

Each stage must finish before the next begins. Failures are not retried here:
the original exception propagates unchanged and aborts the remaining stages.

Usage:
    scenario = DeployScenario(provider, test_env, workspace)
    try:
        scenario.run("nodejs")
    finally:
        scenario.teardown()
"""

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, TYPE_CHECKING

from appservice_deployer import constants as CONSTANTS
from appservice_deployer.commands.git_deploy import GitDeployCommand, GitDeployCommandData
from appservice_deployer.core.context import JobContext, PublishingProfile
from appservice_deployer.core.exceptions import ResourceCreationError, StagingError
from appservice_deployer.logger import logger
from appservice_deployer.providers.azure import app_service
from appservice_deployer.readiness import wait_for_app_ready
from appservice_deployer.staging import StagedApp, match_files, stage_sample_app

if TYPE_CHECKING:
    from appservice_deployer.core.context import TestEnvironment
    from appservice_deployer.providers.azure.provider import AzureProvider


@dataclass
class ScenarioResult:
    """What a successful scenario run produced."""

    app_type: str
    url: str
    staged: StagedApp
    web_app: Any


def _require(handle: Any, resource_type: str, resource_name: str) -> Any:
    if handle is None:
        raise ResourceCreationError(resource_type, resource_name)
    return handle


class DeployScenario:
    """
    Runs the git deploy workflow for one sample app type.

    Attributes:
        provider: Initialized AzureProvider
        test_env: Resource names, region and pricing tier of this run
        workspace: Directory the sample files are staged into
        plan: App Service Plan after environment setup
    """

    def __init__(
        self,
        provider: 'AzureProvider',
        test_env: 'TestEnvironment',
        workspace: Path,
        build_tag: Optional[str] = None,
        command: Optional[GitDeployCommand] = None,
        ready_timeout_seconds: float = CONSTANTS.APP_READY_TIMEOUT_SECONDS
    ):
        if provider is None:
            raise ValueError("provider is required")
        if test_env is None:
            raise ValueError("test_env is required")
        self.provider = provider
        self.test_env = test_env
        self.workspace = Path(workspace)
        self.build_tag = build_tag
        self.command = command or GitDeployCommand()
        self.ready_timeout_seconds = ready_timeout_seconds
        self.plan: Any = None

    # ==========================================
    # Stage 1: Environment Setup
    # ==========================================

    def setup_environment(self) -> Any:
        """Create the Resource Group and the App Service Plan."""
        resource_group = app_service.create_resource_group(self.provider, self.test_env)
        _require(resource_group, "resource_group", self.test_env.azure_resource_group)

        plan = app_service.create_app_service_plan(self.provider, self.test_env)
        self.plan = _require(plan, "app_service_plan", self.test_env.app_service_plan_name)
        return self.plan

    # ==========================================
    # Stage 2: Target Provisioning
    # ==========================================

    def provision_web_app(
        self,
        php_version: Optional[str] = None,
        python_version: Optional[str] = None
    ) -> Any:
        """Create the Web App on the plan and open it for git publishing."""
        if self.plan is None:
            raise ResourceCreationError("app_service_plan", self.test_env.app_service_plan_name)

        web_app = app_service.create_web_app(
            self.provider,
            self.test_env,
            self.plan,
            php_version=php_version,
            python_version=python_version
        )
        _require(web_app, "web_app", self.test_env.app_service_name)
        app_service.enable_scm_basic_auth(self.provider, self.test_env)
        return web_app

    # ==========================================
    # Stage 3: Payload Staging
    # ==========================================

    def stage(self, app_type: str) -> StagedApp:
        """Stage the sample files and check the pattern selects exactly them."""
        self.workspace.mkdir(parents=True, exist_ok=True)
        staged = stage_sample_app(app_type, self.workspace)

        expected = sorted(Path(f.name) for f in staged.files)
        selected = match_files(self.workspace, staged.file_pattern)
        if not staged.files or selected != expected:
            raise StagingError(
                f"Pattern '{staged.file_pattern}' selects {[str(p) for p in selected]}, "
                f"staged {[str(p) for p in expected]}"
            )
        return staged

    # ==========================================
    # Stage 4: Deploy & Verify
    # ==========================================

    def deploy(
        self,
        web_app: Any,
        publishing_profile: PublishingProfile,
        file_pattern: str
    ) -> GitDeployCommandData:
        """Run the git deploy command; re-raise whatever error it recorded."""
        data = GitDeployCommandData(
            job_context=JobContext.for_workspace(self.workspace, self.build_tag),
            publishing_profile=publishing_profile,
            web_app=web_app,
            file_path=file_pattern,
        )
        self.command.execute(data)

        if data.command_state.is_error():
            if data.error is not None:
                raise data.error
            raise RuntimeError(f"Git deployment to {self.test_env.app_service_name} failed")
        return data

    def verify(self, web_app: Any, expected_content: str) -> str:
        """Poll the app's public URL until it serves expected_content."""
        host_name = getattr(web_app, "default_host_name", None) or \
            self.provider.naming.default_host_name(self.test_env.app_service_name)
        url = f"https://{host_name}"
        wait_for_app_ready(url, expected_content, self.ready_timeout_seconds)
        return url

    # ==========================================
    # Full Run + Teardown
    # ==========================================

    def run(self, app_type: str) -> ScenarioResult:
        """
        Deploy the sample app of the given type and wait until it answers.

        Args:
            app_type: One of "nodejs", "php", "python"

        Returns:
            ScenarioResult with the verified URL

        Raises:
            ResourceCreationError: If a provisioning call returns no resource
            StagingError: If the sample files cannot be staged
            ReadinessTimeoutError: If the app never serves its marker
            Any Azure SDK or git error unchanged
        """
        definition = CONSTANTS.SAMPLE_APPS.get(app_type)
        if definition is None:
            raise ValueError(f"Unknown sample app type '{app_type}'")

        logger.info(f"========== Deploy scenario: {app_type} ==========")

        if self.plan is None:
            self.setup_environment()

        web_app = self.provision_web_app(
            php_version=definition["php_version"],
            python_version=definition["python_version"]
        )
        profile = app_service.get_publishing_profile(self.provider, self.test_env, web_app)

        staged = self.stage(app_type)
        self.deploy(web_app, profile, staged.file_pattern)
        url = self.verify(web_app, staged.sample.expected_content)

        logger.info(f"✓ Scenario {app_type} passed: {url}")
        return ScenarioResult(app_type=app_type, url=url, staged=staged, web_app=web_app)

    def teardown(self) -> None:
        """Best-effort removal of the Resource Group and the workspace."""
        try:
            app_service.destroy_resource_group(self.provider, self.test_env)
        except Exception as e:
            logger.warning(f"Cleanup failed: {e}")
            logger.warning(f"Manual cleanup required: delete '{self.test_env.azure_resource_group}'")
        self.plan = None
        shutil.rmtree(self.workspace, ignore_errors=True)
