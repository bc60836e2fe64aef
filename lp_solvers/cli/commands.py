"""Command handlers for the CLI - load problems, run solvers, display results."""

import json
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..exceptions import LpSolversError
from ..problem import Problem
from ..solvers import AllSolvers, AutoSolver, Status, get_registry

STATUS_STYLES = {
    Status.OPTIMAL: "green",
    Status.SUB_OPTIMAL: "yellow",
    Status.INFEASIBLE: "red",
    Status.UNBOUNDED: "red",
    Status.NOT_SOLVED: "red",
}


class CommandError(Exception):
    """A command could not run; the message is shown to the user."""
    pass


def load_problem(path: str) -> Problem:
    """
    Load a problem description from a YAML or JSON file.

    Raises:
        CommandError: if the file is missing or does not describe a problem
    """
    file_path = Path(path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise CommandError(f"Cannot read {path}: {e}") from e

    try:
        if file_path.suffix.lower() == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise CommandError(f"Cannot parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise CommandError(f"{path} does not contain a problem description")
    data.setdefault("name", file_path.stem)

    try:
        return Problem.from_dict(data)
    except ValidationError as e:
        raise CommandError(f"Invalid problem in {path}:\n{e}") from e


class CommandHandler:
    """
    Handles CLI commands.
    Pure presentation logic on top of the solvers package.
    """

    def __init__(self, console: Console):
        self.console = console

    def handle_solvers(self):
        """Display registered solvers and whether they run on this machine."""
        solvers = get_registry().list_all()

        table = Table(title="Solvers")
        table.add_column("Name", style="cyan")
        table.add_column("Command")
        table.add_column("Available", justify="center")

        for info in solvers.values():
            available = "[green]✓[/green]" if info["available"] else "[red]✗[/red]"
            table.add_row(info["name"], info["command"], available)

        self.console.print()
        self.console.print(table)
        self.console.print()

    def handle_lp(self, path: str):
        """Print a problem file rendered in the .lp format."""
        problem = load_problem(path)
        self.console.print(problem.to_lp(), markup=False, highlight=False, end="")

    def handle_solve(self, path: str, solver_name: Optional[str] = None, options: Optional[Dict[str, Any]] = None):
        """Solve a problem file and display the solution."""
        problem = load_problem(path)
        solver = self._build_solver(solver_name, options or {})

        try:
            if isinstance(solver, AutoSolver):
                # Report the backend that actually runs
                solver = solver.find_solver()
            solution = solver.run(problem)
        except LpSolversError as e:
            raise CommandError(str(e)) from e

        style = STATUS_STYLES[solution.status]
        self.console.print()
        self.console.print(Panel(
            f"[bold]{problem.name}[/bold]  [{style}]{solution.status.value}[/{style}]\n"
            f"[dim]{problem.n_variables} variables • {problem.n_constraints} constraints • solver: {solver.name}[/dim]",
            title="Solution",
            border_style=style,
        ))

        if solution.results:
            table = Table()
            table.add_column("Variable", style="cyan")
            table.add_column("Value", justify="right")
            for name, value in solution.results.items():
                table.add_row(name, f"{value:g}")
            self.console.print(table)
        self.console.print()

    def _build_solver(self, solver_name: Optional[str], options: Dict[str, Any]):
        if solver_name is None:
            if options:
                self.console.print("[yellow]Options are ignored without --solver[/yellow]")
            return AllSolvers()

        solver = get_registry().get(solver_name)
        if solver is None:
            names = ", ".join(get_registry().names())
            raise CommandError(f"Unknown solver: {solver_name} (choose from {names})")

        setters = {
            "max_seconds": "with_max_seconds",
            "threads": "with_nb_threads",
            "mip_gap": "with_mip_gap",
        }
        for option, value in options.items():
            setter = getattr(solver, setters[option], None)
            if setter is None:
                self.console.print(f"[yellow]{solver.name} does not support {option}, ignored[/yellow]")
                continue
            try:
                solver = setter(value)
            except LpSolversError as e:
                raise CommandError(str(e)) from e
        return solver
