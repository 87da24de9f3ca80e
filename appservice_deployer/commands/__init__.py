"""
Deploy commands.

- base: CommandState and shared command-data handling
- git_runner: Thin wrapper around the git CLI
- git_deploy: GitDeployCommand, pushes workspace files to a web app
"""

from .base import BaseCommandData, CommandState
from .git_deploy import GitDeployCommand, GitDeployCommandData
from .git_runner import GitCommandError, GitRunner

__all__ = [
    "BaseCommandData",
    "CommandState",
    "GitDeployCommand",
    "GitDeployCommandData",
    "GitCommandError",
    "GitRunner",
]
