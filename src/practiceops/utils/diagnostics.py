from typing import List, Optional, Sequence


class CommandExecutionError(Exception):
    """
    Exception raised when an external command cannot be spawned, exits
    non-zero, or exceeds its timeout. Carries the original diagnostic text
    so callers can surface it in their result messages.
    """
    def __init__(
        self,
        message: str,
        command: Optional[Sequence[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
        timed_out: bool = False,
    ):
        self.message = message
        self.command: List[str] = list(command or [])
        self.returncode = returncode
        self.stderr = stderr
        self.timed_out = timed_out
        super().__init__(message)
