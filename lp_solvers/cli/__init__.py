"""
Command line interface.

    python -m lp_solvers.cli solvers
    python -m lp_solvers.cli solve problem.yaml --solver glpk
"""

from .commands import CommandHandler, CommandError, load_problem

__all__ = ["CommandHandler", "CommandError", "load_problem"]
