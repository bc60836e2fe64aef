"""
External command line solvers.

Provides:
- base.py: Status, Solution, SolverProgram and the execute() orchestrator
- cbc.py, glpk.py, gurobi.py, cplex.py: one backend per engine
- auto.py: AutoSolver, picks the first installed solver
- registry.py: solver lookup by name

Usage:
    from lp_solvers.solvers import CbcSolver, AllSolvers

    solution = CbcSolver().run(problem)
    solution = AllSolvers().run(problem)
"""

from lp_solvers.solvers.base import (
    Solution,
    SolverProgram,
    Status,
    WithMaxSeconds,
    WithMipGap,
    WithNbThreads,
    execute,
    probe_problem,
)
from lp_solvers.solvers.cbc import CbcSolver
from lp_solvers.solvers.glpk import GlpkSolver
from lp_solvers.solvers.gurobi import GurobiSolver
from lp_solvers.solvers.cplex import CplexSolver
from lp_solvers.solvers.auto import AllSolvers, AutoSolver, NoSolver, default_solvers
from lp_solvers.solvers.registry import (
    SolverRegistry,
    get_available_solvers,
    get_registry,
    get_solver,
    list_solvers,
    register_solver,
)

__all__ = [
    # Core abstractions
    "Solution",
    "SolverProgram",
    "Status",
    "WithMaxSeconds",
    "WithMipGap",
    "WithNbThreads",
    "execute",
    "probe_problem",
    # Solvers
    "CbcSolver",
    "GlpkSolver",
    "GurobiSolver",
    "CplexSolver",
    # Automatic selection
    "AllSolvers",
    "AutoSolver",
    "NoSolver",
    "default_solvers",
    # Registry
    "SolverRegistry",
    "get_available_solvers",
    "get_registry",
    "get_solver",
    "list_solvers",
    "register_solver",
]
