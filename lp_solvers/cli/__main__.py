"""
Entry point for running the lp_solvers CLI as a module.

Usage:
    python -m lp_solvers.cli solvers
    python -m lp_solvers.cli lp problem.yaml
    python -m lp_solvers.cli solve problem.yaml --solver cbc --seconds 60
"""

import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from .commands import CommandError, CommandHandler

USAGE = """Usage:
  lp-solvers solvers
  lp-solvers lp PROBLEM_FILE
  lp-solvers solve PROBLEM_FILE [--solver NAME] [--seconds N] [--threads N] [--gap G] [--verbose]"""


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    # Solver command overrides may live in .env
    load_dotenv()

    args = list(sys.argv[1:] if argv is None else argv)
    console = Console()

    positional = []
    solver_name = None
    options = {}
    verbose = False
    i = 0
    try:
        while i < len(args):
            if args[i] == "--solver" and i + 1 < len(args):
                solver_name = args[i + 1]
                i += 2
            elif args[i] == "--seconds" and i + 1 < len(args):
                options["max_seconds"] = int(args[i + 1])
                i += 2
            elif args[i] == "--threads" and i + 1 < len(args):
                options["threads"] = int(args[i + 1])
                i += 2
            elif args[i] == "--gap" and i + 1 < len(args):
                options["mip_gap"] = float(args[i + 1])
                i += 2
            elif args[i] in ("-v", "--verbose"):
                verbose = True
                i += 1
            else:
                positional.append(args[i])
                i += 1
    except ValueError as e:
        console.print(f"[red]Invalid option value: {escape(str(e))}[/red]")
        return 2

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    handler = CommandHandler(console)
    command = positional[0] if positional else None
    try:
        if command == "solvers" and len(positional) == 1:
            handler.handle_solvers()
        elif command == "lp" and len(positional) == 2:
            handler.handle_lp(positional[1])
        elif command == "solve" and len(positional) == 2:
            handler.handle_solve(positional[1], solver_name=solver_name, options=options)
        else:
            console.print(USAGE, markup=False, highlight=False)
            return 2
    except CommandError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
