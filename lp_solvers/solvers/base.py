"""
Base classes shared by all external solvers.

Each solver is a SolverProgram describing how to call one command line
engine: the executable, its argument vector, where the solution file goes,
an optional stdout status sniffer, and a parser for its result file.
execute() ties these together with the .lp serializer:

    problem -> temp .lp file -> subprocess -> result file -> Solution

Usage:
    from lp_solvers.solvers import CbcSolver

    solution = CbcSolver().with_max_seconds(60).run(problem)
"""

import copy
import logging
import os
import subprocess
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

from ..config import SolverOptions, command_for
from ..exceptions import FormatError, LpSolversError, ParseError, ProcessError
from ..lp_format import LpProblem, Sense, write_tmp_file
from ..problem import Problem, Variable

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class Status(str, Enum):
    """Solution status, common to all solvers."""

    OPTIMAL = "Optimal"          # the best possible solution was found
    SUB_OPTIMAL = "SubOptimal"   # a solution was found, it may not be the best one
    INFEASIBLE = "Infeasible"    # the problem has no solution
    UNBOUNDED = "Unbounded"      # no finite optimum
    NOT_SOLVED = "NotSolved"     # unable to solve


@dataclass
class Solution:
    """
    Result of a solver run.

    `results` maps variable names to values. Solvers that only report
    non-zero values are seeded with every problem variable at 0.0. When the
    status comes from the solver's stdout alone (no result file is read),
    `results` is empty; otherwise it holds the values listed in the result
    file, even for an infeasible status.
    """

    status: Status
    results: Dict[str, float] = field(default_factory=dict)

    def __getitem__(self, name: str) -> float:
        return self.results[name]

    def get(self, name: str, default: Optional[float] = None) -> Optional[float]:
        return self.results.get(name, default)

    @property
    def is_feasible(self) -> bool:
        """Whether the solver returned a usable assignment."""
        return self.status in (Status.OPTIMAL, Status.SUB_OPTIMAL)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "results": dict(self.results),
        }


def probe_problem() -> Problem:
    """A trivial one-variable problem, only used to check that a solver runs."""
    return Problem(
        name="dummy",
        sense=Sense.MINIMIZE,
        objective="x",
        variables=[Variable(name="x", lower_bound=0.0, upper_bound=1.0)],
        constraints=[],
    )


def zero_results(problem: Optional[LpProblem]) -> Dict[str, float]:
    """Every variable of the problem mapped to 0.0 (empty without a problem)."""
    if problem is None:
        return {}
    return {variable.name: 0.0 for variable in problem.variables}


def parse_value(text: str, field_name: str) -> float:
    """
    Parse a numeric field of a result file.

    Raises:
        ParseError: naming the field and the offending text
    """
    try:
        return float(text)
    except ValueError as e:
        raise ParseError(
            f"Invalid value for {field_name}: {text!r}",
            field=field_name,
            value=text,
        ) from e


class SolverProgram(ABC):
    """
    Abstract base class for command line solvers.

    Subclasses provide:
    - name: display name
    - arguments(): full argument vector for one run
    - read_specific_solution(): parser for the result file
    and may override solution_suffix() and parse_stdout_status().
    """

    #: registry key and LP_SOLVERS_<KEY>_COMMAND lookup
    key: str = ""

    def __init__(
        self,
        command_name: Optional[str] = None,
        temp_solution_file: Optional[PathLike] = None,
        options: Optional[SolverOptions] = None,
    ):
        """
        Args:
            command_name: Executable to run (defaults to the solver's usual name)
            temp_solution_file: Fixed path for the solution file; by default a
                fresh temporary file is used for every run
            options: Command line knobs
        """
        self._command_name = command_name or self.default_command_name()
        self._temp_solution_file = Path(temp_solution_file) if temp_solution_file else None
        self.options = options or SolverOptions()

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name (e.g., 'Cbc')."""
        pass

    def default_command_name(self) -> str:
        return command_for(self.key)

    @property
    def command_name(self) -> str:
        """Executable invoked for each run."""
        return self._command_name

    @abstractmethod
    def arguments(self, lp_file: Path, solution_file: Path) -> List[str]:
        """
        Command line arguments for one run.

        Args:
            lp_file: Problem file to read
            solution_file: Where the solver must write its result
        """
        pass

    def preferred_temp_solution_file(self) -> Optional[Path]:
        """Fixed solution path, or None to allocate a temporary file per run."""
        return self._temp_solution_file

    def solution_suffix(self) -> Optional[str]:
        """Suffix the solution file must have, if the solver cares."""
        return None

    def parse_stdout_status(self, stdout: str) -> Optional[Status]:
        """
        Classify a run from the solver's stdout alone.

        Infeasible or Unbounded short-circuits result file parsing; any other
        status overrides the status read from the file.
        """
        return None

    @abstractmethod
    def read_specific_solution(self, f: TextIO, problem: Optional[LpProblem] = None) -> Solution:
        """
        Parse this solver's result file.

        Args:
            f: Open result file
            problem: The solved problem, for parsers that seed zero values

        Raises:
            FormatError: if the file is malformed
        """
        pass

    def read_solution_from_path(self, path: PathLike, problem: Optional[LpProblem] = None) -> Solution:
        """Open a result file and parse it."""
        try:
            f = open(path, encoding="utf-8", errors="replace")
        except OSError as e:
            raise FormatError(f"Cannot open solution file {path}: {e}") from e
        with f:
            return self.read_specific_solution(f, problem)

    def run(self, problem: LpProblem) -> Solution:
        """Solve a problem with this solver. See execute()."""
        return execute(self, problem)

    def is_available(self) -> bool:
        """Whether the solver can be run here, checked by solving a probe problem."""
        try:
            self.run(probe_problem())
        except LpSolversError as e:
            logger.debug(f"{self.name} is not available: {e}")
            return False
        return True

    def get_info(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "command": self.command_name,
            "options": self.options.to_dict(),
        }

    # Configuration. Every setter returns a new solver, the original is unchanged.

    def _replace(self, **attributes: Any) -> "SolverProgram":
        new = copy.copy(self)
        new.__dict__.update(attributes)
        return new

    def with_command_name(self, command_name: str) -> "SolverProgram":
        """Use another executable."""
        return self._replace(_command_name=command_name)

    def with_temp_solution_file(self, temp_solution_file: PathLike) -> "SolverProgram":
        """Always write the solution to this path."""
        return self._replace(_temp_solution_file=Path(temp_solution_file))

    def _with_options(self, **changes: Any) -> "SolverProgram":
        return self._replace(options=self.options.updated(**changes))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(command_name={self.command_name!r}, options={self.options.to_dict()})"


class WithMaxSeconds:
    """Solvers accepting a maximum run time."""

    @property
    def max_seconds(self) -> Optional[int]:
        return self.options.max_seconds

    def with_max_seconds(self, seconds: int):
        """
        Raises:
            ConfigError: if seconds is not a positive integer
        """
        return self._with_options(max_seconds=seconds)


class WithNbThreads:
    """Solvers whose parallelism can be configured."""

    @property
    def nb_threads(self) -> Optional[int]:
        return self.options.threads

    def with_nb_threads(self, threads: int):
        """
        Raises:
            ConfigError: if threads is not a positive integer
        """
        return self._with_options(threads=threads)


class WithMipGap:
    """Solvers accepting a relative MIP gap."""

    @property
    def mip_gap(self) -> Optional[float]:
        return self.options.mip_gap

    def with_mip_gap(self, mip_gap: float):
        """
        Raises:
            ConfigError: if the gap is not positive and finite
        """
        return self._with_options(mip_gap=mip_gap)


def _allocate_solution_file(suffix: Optional[str]) -> Path:
    """Reserve a unique path; the file itself must be created by the solver."""
    fd, name = tempfile.mkstemp(prefix="lp_solvers_", suffix=suffix or "")
    os.close(fd)
    path = Path(name)
    path.unlink()
    return path


def _remove_quietly(path: Path) -> None:
    try:
        path.unlink()
    except FileNotFoundError:
        pass
    except OSError as e:
        logger.warning(f"Could not remove temporary file {path}: {e}")


def execute(solver: SolverProgram, problem: LpProblem) -> Solution:
    """
    Run a solver on a problem.

    Steps:
    1. Write the problem to a temporary .lp file
    2. Pick the solution path (solver-preferred or a fresh temp file)
    3. Run the solver command and capture its output
    4. Let the solver classify the run from stdout
    5. Otherwise parse the result file, stdout status overriding it
    Temporary files are removed afterwards, failures to do so only logged.

    Args:
        solver: Solver description
        problem: Problem to solve

    Returns:
        Solution (Infeasible/Unbounded ones have empty results)

    Raises:
        ProcessError: problem file not writable, executable missing or
            exited with a failure status
        FormatError: the result file is missing or could not be read
    """
    command = solver.command_name
    try:
        lp_file = write_tmp_file(problem)
    except OSError as e:
        raise ProcessError(f"Unable to create {command} problem file: {e}", command=command) from e

    solution_file = solver.preferred_temp_solution_file()
    owns_solution_file = solution_file is None
    try:
        if owns_solution_file:
            solution_file = _allocate_solution_file(solver.solution_suffix())
        else:
            # A result left over from an earlier run must not be read back
            _remove_quietly(solution_file)

        arguments = [str(arg) for arg in solver.arguments(lp_file, solution_file)]
        logger.debug(f"Running {command} {' '.join(arguments)}")

        try:
            completed = subprocess.run([command, *arguments], capture_output=True)
        except OSError as e:
            raise ProcessError(f"Error while running {command}: {e}", command=command) from e

        stdout = completed.stdout.decode("utf-8", errors="replace")
        if completed.returncode != 0:
            raise ProcessError(
                f"{command} exited with status {completed.returncode}",
                command=command,
                returncode=completed.returncode,
                stdout=stdout,
            )

        status_hint = solver.parse_stdout_status(stdout)
        if status_hint in (Status.INFEASIBLE, Status.UNBOUNDED):
            logger.debug(f"{command} reported {status_hint.value} on stdout")
            return Solution(status_hint, {})

        try:
            solution = solver.read_solution_from_path(solution_file, problem)
        except FormatError as e:
            e.solver_output = stdout
            raise

        if status_hint is not None:
            solution.status = status_hint
        return solution

    finally:
        _remove_quietly(lp_file)
        if owns_solution_file and solution_file is not None:
            _remove_quietly(solution_file)
