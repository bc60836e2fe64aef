"""
lp_solvers - write linear problems in the .lp format and solve them with
external command line solvers (Cbc, GLPK, Gurobi, CPLEX).

    from lp_solvers import Problem, Variable, Constraint, AllSolvers

    problem = Problem(
        name="int_problem",
        sense="maximize",
        objective="x - y",
        variables=[Variable.integer("x", -10, -1), Variable.integer("y", 4, 7)],
        constraints=[Constraint(lhs="x - y", operator="<=", rhs=-4.5)],
    )
    solution = AllSolvers().run(problem)
    print(solution.status, solution.results)
"""

__version__ = "0.6.0"

from .exceptions import (
    LpSolversError,
    ConfigError,
    ProcessError,
    FormatError,
    ParseError,
    NotAvailableError,
)
from .lp_format import Sense, Operator, render, format_number, write_tmp_file
from .problem import StrExpression, LinearExpression, Variable, Constraint, Problem
from .config import SolverOptions
from .util import UniqueNameGenerator
from .solvers import (
    Status,
    Solution,
    SolverProgram,
    execute,
    CbcSolver,
    GlpkSolver,
    GurobiSolver,
    CplexSolver,
    AutoSolver,
    AllSolvers,
    NoSolver,
    get_solver,
)

__all__ = [
    # Errors
    "LpSolversError",
    "ConfigError",
    "ProcessError",
    "FormatError",
    "ParseError",
    "NotAvailableError",
    # Problem model and .lp format
    "Sense",
    "Operator",
    "render",
    "format_number",
    "write_tmp_file",
    "StrExpression",
    "LinearExpression",
    "Variable",
    "Constraint",
    "Problem",
    "SolverOptions",
    "UniqueNameGenerator",
    # Solvers
    "Status",
    "Solution",
    "SolverProgram",
    "execute",
    "CbcSolver",
    "GlpkSolver",
    "GurobiSolver",
    "CplexSolver",
    "AutoSolver",
    "AllSolvers",
    "NoSolver",
    "get_solver",
]
