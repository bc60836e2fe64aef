"""
Solver options and environment configuration.

SolverOptions holds the knobs forwarded to solvers on their command line.
Values are validated here once, so every backend applies the same rules:

- max_seconds: positive integer
- threads: positive integer
- mip_gap: relative gap, strictly positive and finite (0, negatives,
  NaN and infinity are rejected)

Executable names can be overridden per solver with environment variables
(LP_SOLVERS_CBC_COMMAND, LP_SOLVERS_GLPK_COMMAND, LP_SOLVERS_GUROBI_COMMAND,
LP_SOLVERS_CPLEX_COMMAND).
"""

import math
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError


ENV_PREFIX = "LP_SOLVERS_"

DEFAULT_COMMANDS = {
    "cbc": "cbc",
    "glpk": "glpsol",
    "gurobi": "gurobi_cl",
    "cplex": "cplex",
}


class SolverOptions(BaseModel):
    """Options shared by all solver backends; unset options are None."""

    max_seconds: Optional[int] = Field(None, gt=0, description="Maximum run time in seconds")
    threads: Optional[int] = Field(None, gt=0, description="Number of solver threads")
    mip_gap: Optional[float] = Field(None, description="Relative optimality gap")

    @field_validator("mip_gap")
    @classmethod
    def validate_mip_gap(cls, v):
        """Reject zero, negative, NaN and infinite gaps."""
        if v is not None and not (v > 0 and math.isfinite(v)):
            raise ValueError("Invalid MIP gap: must be positive and finite")
        return v

    def updated(self, **changes: Any) -> "SolverOptions":
        """
        Return a validated copy with some options changed.

        Raises:
            ConfigError: if a new value is invalid
        """
        data = self.model_dump()
        data.update(changes)
        try:
            return SolverOptions(**data)
        except ValidationError as e:
            option = next(iter(changes), None)
            value = changes.get(option) if option else None
            first = e.errors()[0]
            raise ConfigError(
                f"Invalid value for {option}: {value!r} ({first['msg']})",
                option=option,
                value=value,
            ) from e

    def to_dict(self) -> Dict[str, Any]:
        """Options that are set, for display."""
        return {k: v for k, v in self.model_dump().items() if v is not None}

    class Config:
        frozen = True


def command_for(solver: str) -> str:
    """
    Executable name for a solver, honoring LP_SOLVERS_<NAME>_COMMAND.

    Args:
        solver: Solver key ("cbc", "glpk", "gurobi", "cplex")
    """
    key = solver.lower()
    return os.environ.get(f"{ENV_PREFIX}{key.upper()}_COMMAND", DEFAULT_COMMANDS[key])
