"""
Git deployment of workspace files to an App Service web app.

Flow:
    1. Expand source/target directories with the job's environment
    2. Clone the app's SCM repository into a temporary directory
    3. Copy files matching the pattern from the workspace into the clone
    4. Commit (skipped when nothing changed) and force-push HEAD:master
    5. Remove the temporary clone

Usage:
    from appservice_deployer.commands.git_deploy import GitDeployCommand, GitDeployCommandData

    data = GitDeployCommandData(
        job_context=JobContext.for_workspace(workspace),
        publishing_profile=profile,
        web_app=web_app,
        file_path="*.js,*.json",
    )
    GitDeployCommand().execute(data)
    data.command_state  # CommandState.SUCCESS
"""

import logging
import shutil
import tempfile
from pathlib import Path
from string import Template
from typing import Any, List, Mapping, Optional

from appservice_deployer import constants as CONSTANTS
from appservice_deployer.commands.base import BaseCommandData, CommandState
from appservice_deployer.commands.git_runner import GitRunner
from appservice_deployer.core.context import JobContext, PublishingProfile
from appservice_deployer.staging import match_files

logger = logging.getLogger(__name__)


class GitDeployCommandData(BaseCommandData):
    """
    Inputs of a git deploy.

    Attributes:
        publishing_profile: Git URL and credentials of the target app
        web_app: The target web app handle (used for logging)
        file_path: Comma-separated glob pattern selecting the files to deploy
        source_directory: Workspace sub-directory the pattern is relative to
        target_directory: Repository sub-directory the files are copied into
    """

    def __init__(
        self,
        job_context: JobContext,
        publishing_profile: PublishingProfile,
        web_app: Any,
        file_path: str,
        source_directory: str = "",
        target_directory: str = ""
    ):
        super().__init__(job_context)
        self.publishing_profile = publishing_profile
        self.web_app = web_app
        self.file_path = file_path
        self.source_directory = source_directory
        self.target_directory = target_directory

    def get_publishing_profile(self) -> PublishingProfile:
        return self.publishing_profile

    def get_web_app_base(self) -> Any:
        return self.web_app

    def get_file_path(self) -> str:
        return self.file_path


def expand_env(value: Optional[str], env: Mapping[str, str]) -> str:
    """Expand $VAR and ${VAR} references; unknown variables are left as-is."""
    return Template(value or "").safe_substitute(env)


def _resolve_inside(base: Path, relative: str) -> Path:
    """Join relative onto base and refuse paths that escape it."""
    resolved = (base / relative).resolve()
    if resolved != base.resolve() and base.resolve() not in resolved.parents:
        raise ValueError(f"Directory '{relative}' is outside of {base}")
    return resolved


def copy_matching_files(
    source_dir: Path,
    target_dir: Path,
    pattern: str
) -> List[Path]:
    """
    Copy files selected by pattern from source_dir to target_dir.

    Relative paths are preserved.

    Returns:
        Relative paths of the copied files
    """
    copied = match_files(source_dir, pattern)
    for relative in copied:
        destination = target_dir / relative
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source_dir / relative, destination)
    return copied


class GitDeployCommand:
    """Pushes workspace files to a web app's git repository."""

    def execute(self, data: GitDeployCommandData) -> None:
        job_context = data.get_job_context()
        env = job_context.env_vars()
        profile = data.get_publishing_profile()
        web_app = data.get_web_app_base()
        app_name = getattr(web_app, "name", None) or profile.git_url

        data.set_command_state(CommandState.RUNNING)
        data.log_status(f"Starting git deployment to {app_name}")

        repo_dir = Path(tempfile.mkdtemp(prefix="appservice-git-")) / "repo"
        try:
            workspace = Path(job_context.workspace)
            source_dir = _resolve_inside(workspace, expand_env(data.source_directory, env))

            runner = GitRunner(
                repo_dir,
                username=profile.git_username,
                password=profile.git_password
            )
            runner.clone(profile.git_url)

            target_dir = _resolve_inside(repo_dir, expand_env(data.target_directory, env))
            copied = copy_matching_files(source_dir, target_dir, data.get_file_path())
            data.log_status(f"Copied {len(copied)} file(s) matching '{data.get_file_path()}'")
            if not copied:
                logger.warning(f"  No workspace files match '{data.get_file_path()}' in {source_dir}")

            runner.add_all()
            if not runner.has_changes():
                data.log_status("No changes to commit")
                data.set_command_state(CommandState.SUCCESS)
                return

            message = expand_env(CONSTANTS.COMMIT_MESSAGE_TEMPLATE, env)
            runner.commit(message, CONSTANTS.GIT_AUTHOR_NAME, CONSTANTS.GIT_AUTHOR_EMAIL)
            runner.push(profile.git_url, f"HEAD:{CONSTANTS.GIT_REMOTE_BRANCH}")

            data.log_status(f"✓ Git deployment to {app_name} pushed")
            data.set_command_state(CommandState.SUCCESS)
        except Exception as e:
            data.log_error("Fail to deploy using git: ", e)
        finally:
            shutil.rmtree(repo_dir.parent, ignore_errors=True)
