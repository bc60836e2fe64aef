"""
Gurobi solver backend (gurobi_cl).

Command line:
    gurobi_cl ResultFile=out.sol [MIPGap=G] problem.lp

Solution file: a header line, optional `#` comment lines (Gurobi 7+), then
`name value` pairs. The file carries no status; stdout is used for that.
"""

from pathlib import Path
from typing import List, Optional, TextIO

from ..exceptions import FormatError
from ..lp_format import LpProblem, format_number
from .base import SolverProgram, Solution, Status, WithMipGap, parse_value


class GurobiSolver(WithMipGap, SolverProgram):
    """The proprietary Gurobi solver."""

    key = "gurobi"

    @property
    def name(self) -> str:
        return "Gurobi"

    def arguments(self, lp_file: Path, solution_file: Path) -> List[str]:
        args = [f"ResultFile={solution_file}"]
        if self.mip_gap is not None:
            args.append(f"MIPGap={format_number(self.mip_gap)}")
        args.append(str(lp_file))
        return args

    def parse_stdout_status(self, stdout: str) -> Optional[Status]:
        if "Optimal solution found" in stdout:
            return Status.OPTIMAL
        if "infeasible" in stdout:
            return Status.INFEASIBLE
        return None

    def read_specific_solution(self, f: TextIO, problem: Optional[LpProblem] = None) -> Solution:
        results = {}
        f.readline()  # header

        for line in f:
            if line.startswith("#"):
                continue
            fields = line.split()
            if len(fields) != 2:
                raise FormatError("Incorrect solution format", line=line.rstrip("\n"))
            name, value = fields
            results[name] = parse_value(value, name)

        return Solution(Status.OPTIMAL, results)
