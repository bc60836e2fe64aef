"""
IBM CPLEX solver backend.

Command line (interactive commands passed with -c):
    cplex -c 'READ "problem.lp"' ['set mip tolerances mipgap G'] optimize 'WRITE "out.sol"'

The solution is an XML document; values are read from the `variables`
section:

    <CPLEXSolution version="1.2">
     <header ... solutionStatusString="integer optimal solution"/>
     <variables>
      <variable name="x1" index="0" value="40"/>
     </variables>
    </CPLEXSolution>
"""

from pathlib import Path
from typing import Dict, List, Optional, TextIO, Tuple
from xml.etree import ElementTree

from ..exceptions import FormatError, ParseError
from ..lp_format import LpProblem, format_number
from .base import SolverProgram, Solution, Status, WithMipGap

CHUNK_SIZE = 64 * 1024


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _variable_name_and_value(attributes: Dict[str, str]) -> Tuple[str, float]:
    name = attributes.get("name")
    raw_value = attributes.get("value")
    if name is None or raw_value is None:
        raise FormatError("name and value not found for variable", line=str(attributes))
    try:
        value = float(raw_value)
    except ValueError:
        raise ParseError(
            f"invalid variable value for {name!r}: {raw_value!r}",
            field=name,
            value=raw_value,
        ) from None
    return name, value


def read_cplex_solution(f: TextIO) -> Solution:
    """
    Parse a CPLEX XML solution.

    Parsing stops at the end of the `variables` section; the rest of the
    document is not inspected.

    Raises:
        FormatError: malformed XML, or a document ending inside `variables`
        ParseError: a variable value that is not a number
    """
    solution = Solution(Status.OPTIMAL, {})
    parser = ElementTree.XMLPullParser(events=("start", "end"))
    in_variables = False
    position = 0

    try:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), ""):
            parser.feed(chunk)
            position += len(chunk)
            for event, element in parser.read_events():
                tag = _local_name(element.tag)
                if not in_variables:
                    if event == "start" and tag == "variables":
                        in_variables = True
                elif event == "start" and tag == "variable":
                    name, value = _variable_name_and_value(element.attrib)
                    solution.results[name] = value
                elif event == "end" and tag == "variables":
                    return solution
                if event == "end":
                    element.clear()
    except ElementTree.ParseError as e:
        line, column = e.position
        raise FormatError(f"Error at line {line}, column {column}: {e}") from e

    if in_variables:
        raise FormatError(f"Error at position {position}: Unterminated variables section")
    return solution


class CplexSolver(WithMipGap, SolverProgram):
    """IBM CPLEX optimizer."""

    key = "cplex"

    @property
    def name(self) -> str:
        return "Cplex"

    def arguments(self, lp_file: Path, solution_file: Path) -> List[str]:
        args = ["-c", f'READ "{lp_file}"']
        if self.mip_gap is not None:
            args.append(f"set mip tolerances mipgap {format_number(self.mip_gap)}")
        args.append("optimize")
        args.append(f'WRITE "{solution_file}"')
        return args

    def parse_stdout_status(self, stdout: str) -> Optional[Status]:
        if "No solution exists" in stdout:
            return Status.INFEASIBLE
        return None

    def solution_suffix(self) -> Optional[str]:
        return ".sol"

    def read_specific_solution(self, f: TextIO, problem: Optional[LpProblem] = None) -> Solution:
        return read_cplex_solution(f)
