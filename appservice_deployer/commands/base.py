"""
Shared command state and data handling.

A command reads its inputs from a command-data object and reports back
through it: status lines and errors go to the job's task listener, and the
outcome is recorded as a CommandState.
"""

import logging
from enum import Enum
from typing import Optional

from appservice_deployer.core.context import JobContext

logger = logging.getLogger(__name__)


class CommandState(Enum):
    UNKNOWN = "Unknown"
    RUNNING = "Running"
    SUCCESS = "Success"
    HAS_ERROR = "HasError"
    DONE = "Done"

    def is_error(self) -> bool:
        return self is CommandState.HAS_ERROR

    def is_finished(self) -> bool:
        return self in (CommandState.SUCCESS, CommandState.HAS_ERROR, CommandState.DONE)


class BaseCommandData:
    """
    Inputs and outcome of a single command execution.

    Attributes:
        job_context: The CI job the command runs in
        command_state: Outcome of the last execute() call
        error: First exception recorded through log_error, if any
    """

    def __init__(self, job_context: JobContext):
        if job_context is None:
            raise ValueError("job_context is required")
        self.job_context = job_context
        self.command_state = CommandState.UNKNOWN
        self.error: Optional[BaseException] = None

    def get_job_context(self) -> JobContext:
        return self.job_context

    def set_command_state(self, state: CommandState) -> None:
        self.command_state = state

    def log_status(self, message: str) -> None:
        self.job_context.task_listener.info(message)

    def log_error(self, message: str, error: Optional[BaseException] = None) -> None:
        """Report a failure to the job and mark the command as failed."""
        if error is not None:
            self.job_context.task_listener.error(f"{message}{error}")
            if self.error is None:
                self.error = error
        else:
            self.job_context.task_listener.error(message)
        self.set_command_state(CommandState.HAS_ERROR)
