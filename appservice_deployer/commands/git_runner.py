"""
Git CLI wrapper used by the deploy command.

Credentials are passed per command as an HTTP basic-auth header
(`-c http.extraHeader=...`), so they never land in the remote URL, in
.git/config or in log output.

Usage:
    from appservice_deployer.commands.git_runner import GitRunner

    runner = GitRunner(repo_dir, username="$my-app", password="secret")
    runner.clone("https://my-app.scm.azurewebsites.net:443/my-app.git")
    runner.add_all()
    if runner.has_changes():
        runner.commit("Deploy jenkins-job-1", "Jenkins", "jenkins@localhost")
        runner.push("https://my-app.scm.azurewebsites.net:443/my-app.git", "HEAD:master")
"""

import base64
import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

from appservice_deployer import constants as CONSTANTS

logger = logging.getLogger(__name__)

_MASK = "***"


class GitCommandError(Exception):
    """Raised when a git command fails."""

    def __init__(self, command: str, return_code: int, stderr: str):
        self.command = command
        self.return_code = return_code
        self.stderr = stderr
        super().__init__(f"git {command} failed (exit {return_code}): {stderr}")


class GitRunner:
    """
    Runs git commands against one local repository directory.

    Attributes:
        repo_dir: Working tree the commands operate on
    """

    def __init__(
        self,
        repo_dir: Path,
        username: Optional[str] = None,
        password: Optional[str] = None,
        executable: str = CONSTANTS.GIT_EXECUTABLE
    ):
        if not repo_dir:
            raise ValueError("repo_dir is required")
        self.repo_dir = Path(repo_dir)
        self.executable = executable
        self._auth_header: Optional[str] = None
        if username is not None and password is not None:
            token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
            self._auth_header = f"http.extraHeader=Authorization: Basic {token}"

    def _run_command(
        self,
        args: list[str],
        authenticated: bool = False,
        config: Optional[dict] = None,
        cwd: Optional[Path] = None,
        check: bool = True
    ) -> subprocess.CompletedProcess:
        """
        Run a git command.

        Args:
            args: Command arguments (without 'git' prefix)
            authenticated: Whether to send the basic-auth header
            config: Extra one-off git config values (passed as -c key=value)
            cwd: Working directory (defaults to repo_dir)
            check: Whether to raise on non-zero exit

        Raises:
            GitCommandError: If command fails and check=True
        """
        prefix = [self.executable]
        if authenticated and self._auth_header:
            prefix += ["-c", self._auth_header]
        for key, value in (config or {}).items():
            prefix += ["-c", f"{key}={value}"]
        cmd = prefix + args

        logged = [_MASK if part == self._auth_header else part for part in cmd]
        logger.debug(f"Running: {' '.join(logged)}")

        result = subprocess.run(
            cmd,
            cwd=str(cwd or self.repo_dir),
            capture_output=True,
            text=True,
            check=False,
            env={**os.environ, "GIT_TERMINAL_PROMPT": "0"}
        )

        if check and result.returncode != 0:
            # Combine stdout and stderr for full error context
            error_output = ""
            if result.stdout:
                error_output += result.stdout
            if result.stderr:
                error_output += "\n" + result.stderr if error_output else result.stderr
            if not error_output:
                error_output = "No output captured"
            raise GitCommandError(args[0], result.returncode, error_output.strip())

        return result

    def clone(self, remote_url: str) -> None:
        """Clone remote_url into repo_dir (which must not exist or be empty)."""
        self.repo_dir.parent.mkdir(parents=True, exist_ok=True)
        logger.info(f"Cloning {remote_url}")
        self._run_command(
            ["clone", remote_url, str(self.repo_dir)],
            authenticated=True,
            cwd=self.repo_dir.parent
        )

    def add_all(self) -> None:
        """Stage every change in the working tree."""
        self._run_command(["add", "-A"])

    def has_changes(self) -> bool:
        """True if the index or working tree differs from HEAD."""
        result = self._run_command(["status", "--porcelain"])
        return bool(result.stdout.strip())

    def commit(self, message: str, author_name: str, author_email: str) -> None:
        """Commit staged changes as the given author and committer."""
        self._run_command(
            ["commit", "-m", message],
            config={"user.name": author_name, "user.email": author_email}
        )

    def push(self, remote_url: str, refspec: str, force: bool = True) -> None:
        """Push refspec to remote_url."""
        args = ["push"]
        if force:
            args.append("--force")
        args += [remote_url, refspec]
        logger.info(f"Pushing {refspec} to {remote_url}")
        self._run_command(args, authenticated=True)
