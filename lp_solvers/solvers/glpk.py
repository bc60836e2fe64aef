"""
GNU GLPK solver backend.

https://www.gnu.org/software/glpk/

Command line:
    glpsol --lp problem.lp -o out.sol [--tmlim S] [--mipgap G]

The solution is glpsol's printable report:

    Problem:
    Rows:       2
    Columns:    3
    Non-zeros:  6
    Status:     OPTIMAL
    Objective:  obj = 5 (MINimum)

       No.   Row name   St   Activity     Lower bound   Upper bound    Marginal
    ------ ------------ -- ------------- ------------- ------------- -------------
         1 c0           NL             5             5                         1
         2 c1           B              2                           5

       No. Column name  St   Activity     Lower bound   Upper bound    Marginal
    ------ ------------ -- ------------- ------------- ------------- -------------
         1 a            NL             0             0                         1
    ...

Row and column counts come from the second token of lines 2 and 3, the
status from line 5 starting at column 12, and the column section starts
after the rows section.
"""

from pathlib import Path
from typing import Iterator, List, Optional, TextIO

from ..exceptions import FormatError
from ..lp_format import LpProblem, format_number
from .base import SolverProgram, Solution, Status, WithMaxSeconds, WithMipGap, parse_value

STATUS_OFFSET = 12

# Lines between the status line and the first column line, not counting rows
LINES_BEFORE_COLUMNS = 7

GLPK_STATUS = {
    "OPTIMAL": Status.OPTIMAL,
    "INTEGER OPTIMAL": Status.OPTIMAL,
    "FEASIBLE": Status.SUB_OPTIMAL,
    "INTEGER NON-OPTIMAL": Status.SUB_OPTIMAL,
    "INFEASIBLE (FINAL)": Status.INFEASIBLE,
    "INTEGER EMPTY": Status.INFEASIBLE,
    "UNDEFINED": Status.NOT_SOLVED,
    "UNBOUNDED": Status.UNBOUNDED,
    "INTEGER UNDEFINED": Status.UNBOUNDED,
}


def parse_glpk_status(status_line: str) -> Status:
    """
    Map the status line of a glpsol report to a Status.

    Raises:
        FormatError: for an unknown status
    """
    token = status_line.rstrip("\r\n")[STATUS_OFFSET:].rstrip()
    try:
        return GLPK_STATUS[token]
    except KeyError:
        raise FormatError(
            "Incorrect solution format: Unknown solution status", line=token
        ) from None


def _read_size(line: Optional[str]) -> int:
    fields = line.split() if line is not None else []
    if len(fields) < 2:
        raise FormatError("Incorrect solution format", line=line)
    try:
        return int(fields[1])
    except ValueError:
        raise FormatError("Incorrect solution format", line=line) from None


class GlpkSolver(WithMaxSeconds, WithMipGap, SolverProgram):
    """The GNU glpk solver (glpsol)."""

    key = "glpk"

    @property
    def name(self) -> str:
        return "Glpk"

    def arguments(self, lp_file: Path, solution_file: Path) -> List[str]:
        args = ["--lp", str(lp_file), "-o", str(solution_file)]
        if self.max_seconds is not None:
            args += ["--tmlim", str(self.max_seconds)]
        if self.mip_gap is not None:
            args += ["--mipgap", format_number(self.mip_gap)]
        return args

    def read_specific_solution(self, f: TextIO, problem: Optional[LpProblem] = None) -> Solution:
        lines: Iterator[str] = iter(f)

        next(lines, None)                       # Problem:
        rows = _read_size(next(lines, None))    # Rows:
        cols = _read_size(next(lines, None))    # Columns:
        next(lines, None)                       # Non-zeros:
        status_line = next(lines, None)
        if status_line is None:
            raise FormatError("Incorrect solution format: No solution status found")
        status = parse_glpk_status(status_line)

        for _ in range(rows + LINES_BEFORE_COLUMNS):
            next(lines, None)

        results = {}
        for _ in range(cols):
            line = next(lines, None)
            if line is None:
                raise FormatError("Incorrect solution format: Not all columns are present")
            fields = line.split()
            if len(fields) == 2:
                # glpsol moves the rest of the row to the next line after a long name
                continuation = next(lines, None)
                if continuation is not None:
                    fields += continuation.split()
            if len(fields) < 4:
                raise FormatError(
                    "Incorrect solution format: Column specification has too few fields",
                    line=line.rstrip("\n"),
                )
            name = fields[1]
            results[name] = parse_value(fields[3], name)

        return Solution(status, results)
