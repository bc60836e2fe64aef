"""
Automatic solver selection.

AutoSolver holds an ordered list of solvers and uses the first one that is
installed. Availability is checked by solving a tiny probe problem, so a
large problem is only written to disk once a working solver is known.

Usage:
    solution = AllSolvers().run(problem)          # Gurobi, Cplex, Cbc, Glpk
    solution = AutoSolver([CbcSolver(), GlpkSolver()]).run(problem)
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..exceptions import LpSolversError, NotAvailableError
from ..lp_format import LpProblem
from .base import Solution, probe_problem
from .cbc import CbcSolver
from .cplex import CplexSolver
from .glpk import GlpkSolver
from .gurobi import GurobiSolver

logger = logging.getLogger(__name__)


class NoSolver:
    """End of a solver list: never finds a solver."""

    name = "NoSolver"

    def run(self, problem: LpProblem) -> Solution:
        raise NotAvailableError("No solver available")

    def is_available(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NoSolver()"


class AutoSolver:
    """
    A solver that tries several solvers in order.

    The candidate list always ends with NoSolver; if no candidate manages to
    solve the probe problem, run() raises NotAvailableError.
    """

    def __init__(self, solvers: Optional[Iterable[Any]] = None):
        """
        Args:
            solvers: Candidates in order of preference (default: all built-in)
        """
        if solvers is None:
            solvers = default_solvers()
        self.solvers: List[Any] = [s for s in solvers if not isinstance(s, NoSolver)]
        self.solvers.append(NoSolver())

    @classmethod
    def default(cls) -> "AutoSolver":
        return cls(default_solvers())

    @property
    def name(self) -> str:
        return "Auto"

    def with_solver(self, solver: Any) -> "AutoSolver":
        """Return a new AutoSolver that tries `solver` before the current ones."""
        return AutoSolver([solver, *self.solvers])

    def find_solver(self) -> Any:
        """
        Return the first candidate that solves the probe problem.

        Raises:
            NotAvailableError: if none does
        """
        probe = probe_problem()
        for solver in self.solvers:
            try:
                solver.run(probe)
            except LpSolversError as e:
                logger.debug(f"Probe failed for {solver.name}: {e}")
                continue
            logger.info(f"Using solver {solver.name}")
            return solver
        raise NotAvailableError("No solver available")

    def run(self, problem: LpProblem) -> Solution:
        """
        Solve the problem with the first available solver.

        Errors from the chosen solver on the real problem are not retried on
        the next candidate.

        Raises:
            NotAvailableError: if no candidate is usable
        """
        return self.find_solver().run(problem)

    probe_and_run = run

    def get_info(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "candidates": [s.name for s in self.solvers],
        }

    def __repr__(self) -> str:
        return f"AutoSolver({self.solvers!r})"


def default_solvers() -> List[Any]:
    """All built-in solvers, in the default preference order."""
    return [GurobiSolver(), CplexSolver(), CbcSolver(), GlpkSolver()]


def AllSolvers() -> AutoSolver:
    """AutoSolver trying, in order: Gurobi, Cplex, Cbc and Glpk."""
    return AutoSolver(default_solvers())
