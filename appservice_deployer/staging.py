"""
Workspace staging of sample applications.

Copies the packaged sample app files into a workspace directory and selects
files by the comma-separated glob pattern the deploy command receives.

Usage:
    from appservice_deployer.staging import stage_sample_app

    staged = stage_sample_app("python", workspace)
    staged.file_pattern  # "*.py,*.config,requirements.txt"
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from appservice_deployer import constants as CONSTANTS
from appservice_deployer.core.exceptions import StagingError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SampleApp:
    """Static description of one sample application type."""

    app_type: str
    files: tuple
    file_pattern: str
    expected_content: str
    php_version: Optional[str] = None
    python_version: Optional[str] = None


@dataclass(frozen=True)
class StagedApp:
    """Files staged into a workspace for one deploy."""

    sample: SampleApp
    workspace: Path
    files: tuple

    @property
    def file_pattern(self) -> str:
        return self.sample.file_pattern


def get_sample_app(app_type: str) -> SampleApp:
    """
    Look up a sample app definition.

    Raises:
        ValueError: If the app type is unknown
    """
    definition = CONSTANTS.SAMPLE_APPS.get(app_type)
    if definition is None:
        raise ValueError(
            f"Unknown sample app type '{app_type}'. "
            f"Available: {sorted(CONSTANTS.SAMPLE_APPS)}"
        )
    return SampleApp(
        app_type=app_type,
        files=tuple(definition["files"]),
        file_pattern=definition["file_pattern"],
        expected_content=definition["expected_content"],
        php_version=definition["php_version"],
        python_version=definition["python_version"],
    )


def split_pattern(pattern: str) -> List[str]:
    """Split a comma-separated glob pattern, dropping blanks."""
    return [part.strip() for part in (pattern or "").split(",") if part.strip()]


def match_files(directory: Path, pattern: str) -> List[Path]:
    """
    Select files under directory by a comma-separated glob pattern.

    Globs are relative to directory and may use "**". Anything inside a
    .git directory is never selected.

    Returns:
        Sorted relative paths of the matching files
    """
    directory = Path(directory)
    matches = set()
    for glob in split_pattern(pattern):
        for path in directory.glob(glob):
            if not path.is_file():
                continue
            relative = path.relative_to(directory)
            if ".git" in relative.parts:
                continue
            matches.add(relative)
    return sorted(matches)


def extract_resource_file(resource: str, destination: Path) -> Path:
    """
    Copy one packaged sample file (e.g. "python/main.py") to destination.

    Raises:
        StagingError: If the resource does not exist or cannot be copied
    """
    source = CONSTANTS.SAMPLE_APPS_DIR / resource
    if not source.is_file():
        raise StagingError(f"Sample resource not found: {resource}")

    destination = Path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
    except OSError as e:
        raise StagingError(f"Failed to copy {resource} to {destination}: {e}")

    logger.debug(f"  Extracted {resource} -> {destination}")
    return destination


def stage_sample_app(app_type: str, workspace: Path) -> StagedApp:
    """
    Stage every file of a sample app into the workspace root.

    Args:
        app_type: One of "nodejs", "php", "python"
        workspace: Existing workspace directory

    Returns:
        StagedApp listing the staged files

    Raises:
        StagingError: If the workspace is missing or a file cannot be staged
    """
    sample = get_sample_app(app_type)
    workspace = Path(workspace)
    if not workspace.is_dir():
        raise StagingError(f"Workspace does not exist: {workspace}")

    logger.info(f"Staging {app_type} sample app into {workspace}")
    staged = tuple(
        extract_resource_file(f"{app_type}/{name}", workspace / name)
        for name in sample.files
    )
    logger.info(f"✓ Staged {len(staged)} files (pattern: {sample.file_pattern})")

    return StagedApp(sample=sample, workspace=workspace, files=staged)
