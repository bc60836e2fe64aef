"""
Exception types raised by lp_solvers.

Every failure a caller can trigger derives from LpSolversError, so a single
except clause covers all of them. Infeasible and unbounded problems are not
errors: they come back as a Solution with the matching status.
"""

from typing import Any, Optional


class LpSolversError(Exception):
    """Base class for all lp_solvers errors."""
    pass


class ConfigError(LpSolversError, ValueError):
    """Invalid solver option, rejected before anything is executed."""

    def __init__(self, message: str, option: Optional[str] = None, value: Any = None):
        self.option = option
        self.value = value
        super().__init__(message)


class ProcessError(LpSolversError):
    """
    The solver executable could not be run or exited with a failure status.

    Attributes:
        command: Executable that was invoked
        returncode: Exit status, None if the process never started
        stdout: Captured standard output, for diagnostics
    """

    def __init__(
        self,
        message: str,
        command: str,
        returncode: Optional[int] = None,
        stdout: str = "",
    ):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        super().__init__(message)


class FormatError(LpSolversError):
    """
    A solver result artifact does not have the expected shape.

    Attributes:
        line: Offending line or fragment, when known
        solver_output: Solver stdout, attached by the orchestrator
    """

    def __init__(self, message: str, line: Optional[str] = None):
        self.line = line
        self.solver_output: Optional[str] = None
        super().__init__(message)

    def __str__(self) -> str:
        message = super().__str__()
        if self.line is not None:
            message = f"{message}: {self.line!r}"
        if self.solver_output:
            message = f"{message}. Solver output: {self.solver_output}"
        return message


class ParseError(FormatError):
    """A numeric field of a result artifact is not a valid number."""

    def __init__(self, message: str, field: Optional[str] = None, value: Optional[str] = None):
        self.field = field
        self.value = value
        super().__init__(message)


class NotAvailableError(LpSolversError):
    """None of the candidate solvers could be run on this machine."""
    pass
