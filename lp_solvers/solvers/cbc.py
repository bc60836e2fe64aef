"""
COIN-OR Cbc solver backend.

https://github.com/coin-or/Cbc

Command line:
    cbc problem.lp [ratiogap G] [seconds S] [threads T] solve solution out.sol

Solution file layout: a status line, then one line per non-zero variable:

    Optimal - objective value 11.00000000
          0 a                      5                       0
          1 b                      6                       0

Lines may start with a `**` marker (values violating a bound).
"""

from pathlib import Path
from typing import List, Optional, TextIO

from ..exceptions import FormatError
from ..lp_format import LpProblem, format_number
from .base import (
    SolverProgram,
    Solution,
    Status,
    WithMaxSeconds,
    WithMipGap,
    WithNbThreads,
    parse_value,
    zero_results,
)


def parse_cbc_status(status_line: str) -> Status:
    """
    Map the first line of a Cbc solution file to a Status.

    "Optimal (within gap tolerance)" counts as sub-optimal, infeasibility is
    reported as "Infeasible" or "Integer infeasible", and "Stopped on ..."
    (time, iterations, difficulties, ctrl-c) as sub-optimal. Anything else is
    NotSolved.

    Raises:
        FormatError: if the line is empty
    """
    tokens = status_line.split()
    if not tokens:
        raise FormatError("Incorrect solution format: missing status line")

    status = tokens[0]
    if status == "Optimal":
        if len(tokens) > 1 and tokens[1] == "(within":
            return Status.SUB_OPTIMAL
        return Status.OPTIMAL
    if status in ("Infeasible", "Integer"):
        return Status.INFEASIBLE
    if status == "Unbounded":
        return Status.UNBOUNDED
    if status == "Stopped":
        return Status.SUB_OPTIMAL
    return Status.NOT_SOLVED


class CbcSolver(WithMaxSeconds, WithNbThreads, WithMipGap, SolverProgram):
    """
    The coin-or Cbc solver.

    Cbc only writes non-zero variables, so when the problem is known every
    variable is reported, missing ones at 0.
    """

    key = "cbc"

    @property
    def name(self) -> str:
        return "Cbc"

    def arguments(self, lp_file: Path, solution_file: Path) -> List[str]:
        args = [str(lp_file)]
        if self.mip_gap is not None:
            args += ["ratiogap", format_number(self.mip_gap)]
        for option, value in (("seconds", self.max_seconds), ("threads", self.nb_threads)):
            if value is not None:
                args += [option, str(value)]
        args += ["solve", "solution", str(solution_file)]
        return args

    def read_specific_solution(self, f: TextIO, problem: Optional[LpProblem] = None) -> Solution:
        results = zero_results(problem)

        status = parse_cbc_status(f.readline())

        for line in f:
            fields = line.split()
            if fields and fields[0] == "**":
                fields = fields[1:]
            if len(fields) != 4:
                raise FormatError("Incorrect solution format", line=line.rstrip("\n"))
            name = fields[1]
            results[name] = parse_value(fields[2], name)

        return Solution(status, results)
