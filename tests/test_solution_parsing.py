"""
Tests for reading solver result files.

Solution files under tests/solution_files/ are recorded solver outputs.
"""

import io
from pathlib import Path

import pytest

from lp_solvers.exceptions import FormatError, ParseError
from lp_solvers.problem import Problem, Variable
from lp_solvers.solvers import CbcSolver, CplexSolver, GlpkSolver, GurobiSolver, Status
from lp_solvers.solvers.cbc import parse_cbc_status
from lp_solvers.solvers.cplex import read_cplex_solution
from lp_solvers.solvers.glpk import parse_glpk_status

SOLUTION_FILES = Path(__file__).parent / "solution_files"


def solution_path(name: str) -> Path:
    return SOLUTION_FILES / name


def problem_with(*names: str) -> Problem:
    return Problem(
        name="seeded",
        objective=" + ".join(names),
        variables=[Variable(name=n, lower_bound=0) for n in names],
    )


class TestCbc:
    """Test the Cbc solution reader."""

    def test_optimal(self):
        solution = CbcSolver().read_solution_from_path(solution_path("cbc_optimal.sol"))

        assert solution.status == Status.OPTIMAL
        assert solution.results == {"a": 5.0, "b": 6.0, "c": 0.0}

    def test_missing_variables_default_to_zero(self):
        """Cbc omits zero-valued variables; the problem fills them in."""
        problem = problem_with("x", "y", "z")
        solution = CbcSolver().read_solution_from_path(solution_path("cbc_sparse.sol"), problem)

        assert solution.status == Status.OPTIMAL
        assert solution.results == {"x": 0.0, "y": 3.0, "z": 0.0}
        assert list(solution.results) == ["x", "y", "z"]

    def test_without_problem_only_listed_variables(self):
        solution = CbcSolver().read_solution_from_path(solution_path("cbc_sparse.sol"))
        assert solution.results == {"y": 3.0}

    def test_infeasible(self):
        solution = CbcSolver().read_solution_from_path(solution_path("cbc_infeasible.sol"))
        assert solution.status == Status.INFEASIBLE

    def test_infeasible_alternative_format(self):
        """Test 'Integer infeasible' and lines flagged with '**'."""
        solution = CbcSolver().read_solution_from_path(
            solution_path("cbc_infeasible_alternative_format.sol")
        )

        assert solution.status == Status.INFEASIBLE
        assert solution.results == {"a": 2.0, "b": 0.0}

    def test_unbounded(self):
        solution = CbcSolver().read_solution_from_path(solution_path("cbc_unbounded.sol"))
        assert solution.status == Status.UNBOUNDED

    def test_stopped_is_sub_optimal(self):
        solution = CbcSolver().read_solution_from_path(solution_path("cbc_stopped.sol"))

        assert solution.status == Status.SUB_OPTIMAL
        assert solution["x"] == 3.0

    def test_within_gap_is_sub_optimal(self):
        solution = CbcSolver().read_solution_from_path(solution_path("cbc_gap.sol"))

        assert solution.status == Status.SUB_OPTIMAL
        assert solution["x"] == 10.0

    def test_malformed_line(self):
        with pytest.raises(FormatError) as exc_info:
            CbcSolver().read_solution_from_path(solution_path("cbc_malformed.sol"))

        assert exc_info.value.line is not None
        assert "x" in exc_info.value.line

    def test_empty_file(self):
        with pytest.raises(FormatError):
            CbcSolver().read_specific_solution(io.StringIO(""))

    def test_invalid_value(self):
        text = "Optimal - objective value 1.0\n      0 x    abc    0\n"
        with pytest.raises(ParseError) as exc_info:
            CbcSolver().read_specific_solution(io.StringIO(text))

        assert exc_info.value.field == "x"
        assert exc_info.value.value == "abc"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FormatError):
            CbcSolver().read_solution_from_path(tmp_path / "nowhere.sol")

    @pytest.mark.parametrize(
        "line, expected",
        [
            ("Optimal - objective value 1", Status.OPTIMAL),
            ("Optimal (within gap tolerance) - objective value 1", Status.SUB_OPTIMAL),
            ("Infeasible - objective value 0", Status.INFEASIBLE),
            ("Integer infeasible - objective value 0", Status.INFEASIBLE),
            ("Unbounded - objective value 0", Status.UNBOUNDED),
            ("Stopped on iterations - objective value 4", Status.SUB_OPTIMAL),
            ("Stopped on time - objective value 4", Status.SUB_OPTIMAL),
            ("Something else entirely", Status.NOT_SOLVED),
        ],
    )
    def test_status_line(self, line, expected):
        assert parse_cbc_status(line) == expected


class TestGlpk:
    """Test the glpsol report reader."""

    def test_integer_optimal(self):
        solution = GlpkSolver().read_solution_from_path(solution_path("glpk_optimal.sol"))

        assert solution.status == Status.OPTIMAL
        assert solution.results == {"a": 0.0, "b": 5.0, "c": 0.0}

    def test_infeasible(self):
        solution = GlpkSolver().read_solution_from_path(solution_path("glpk_infeasible.sol"))

        assert solution.status == Status.INFEASIBLE
        assert solution.results == {"a": 1.0, "b": 0.0}

    def test_unbounded(self):
        solution = GlpkSolver().read_solution_from_path(solution_path("glpk_unbounded.sol"))

        assert solution.status == Status.UNBOUNDED
        assert solution.results == {"x": 0.0}

    def test_empty_column_bounds(self):
        """Columns without bounds still have an activity in the fourth field."""
        solution = GlpkSolver().read_solution_from_path(solution_path("glpk_empty_col_bounds.sol"))

        assert solution.status == Status.OPTIMAL
        assert solution.results == {"a": 1.0, "b": 0.0}

    def test_long_names_wrap(self):
        solution = GlpkSolver().read_solution_from_path(solution_path("glpk_long_names.sol"))
        assert solution.results == {"production_of_widgets": 3.0, "y": 0.0}

    def test_missing_columns(self):
        with pytest.raises(FormatError, match="Not all columns are present"):
            GlpkSolver().read_solution_from_path(solution_path("glpk_missing_columns.sol"))

    def test_truncated_header(self):
        with pytest.raises(FormatError):
            GlpkSolver().read_specific_solution(io.StringIO("Problem:\nRows: 1\n"))

    def test_bad_row_count(self):
        with pytest.raises(FormatError):
            GlpkSolver().read_specific_solution(io.StringIO("Problem:\nRows: many\nColumns: 1\n"))

    @pytest.mark.parametrize(
        "token, expected",
        [
            ("OPTIMAL", Status.OPTIMAL),
            ("INTEGER OPTIMAL", Status.OPTIMAL),
            ("FEASIBLE", Status.SUB_OPTIMAL),
            ("INTEGER NON-OPTIMAL", Status.SUB_OPTIMAL),
            ("INFEASIBLE (FINAL)", Status.INFEASIBLE),
            ("INTEGER EMPTY", Status.INFEASIBLE),
            ("UNDEFINED", Status.NOT_SOLVED),
            ("UNBOUNDED", Status.UNBOUNDED),
            ("INTEGER UNDEFINED", Status.UNBOUNDED),
        ],
    )
    def test_status_table(self, token, expected):
        assert parse_glpk_status(f"Status:     {token}\n") == expected

    def test_unknown_status(self):
        with pytest.raises(FormatError) as exc_info:
            parse_glpk_status("Status:     SOMETHING ODD\n")
        assert exc_info.value.line == "SOMETHING ODD"


class TestGurobi:
    """Test the Gurobi result file reader."""

    def test_optimal(self):
        solution = GurobiSolver().read_solution_from_path(solution_path("gurobi_optimal.sol"))

        assert solution.status == Status.OPTIMAL
        assert solution.results == {"x": 1.0, "y": 4.0}

    def test_legacy_header(self):
        solution = GurobiSolver().read_solution_from_path(solution_path("gurobi_legacy.sol"))
        assert solution.results == {"a": 2.5, "b": 0.0}

    def test_malformed_line(self):
        text = "# Solution\nx 1 2\n"
        with pytest.raises(FormatError):
            GurobiSolver().read_specific_solution(io.StringIO(text))

    def test_stdout_status(self):
        solver = GurobiSolver()

        assert solver.parse_stdout_status("...\nOptimal solution found (tolerance 1e-04)\n") == Status.OPTIMAL
        assert solver.parse_stdout_status("Model is infeasible\n") == Status.INFEASIBLE
        assert solver.parse_stdout_status("Time limit reached\n") is None


class TestCplex:
    """Test the CPLEX XML solution reader."""

    def test_optimal(self):
        solution = CplexSolver().read_solution_from_path(solution_path("cplex_optimal.sol"))

        assert solution.status == Status.OPTIMAL
        assert solution.results == {"x1": 40.0, "x2": 10.5, "x3": 19.5, "x4": 3.0}

    def test_large_document_across_chunks(self):
        """Sections before and inside variables span many read chunks."""
        constraints = "".join(
            f'<constraint name="c{i}" index="{i}" slack="0"/>' for i in range(20000)
        )
        variables = "".join(
            f'<variable name="x{i}" index="{i}" value="{i}.5"/>' for i in range(5000)
        )
        text = (
            '<CPLEXSolution version="1.2"><header objectiveValue="1"/>'
            f"<linearConstraints>{constraints}</linearConstraints>"
            f"<variables>{variables}</variables></CPLEXSolution>"
        )

        solution = read_cplex_solution(io.StringIO(text))

        assert len(solution.results) == 5000
        assert solution.results["x0"] == 0.5
        assert solution.results["x4999"] == 4999.5

    def test_no_variables_section(self):
        solution = read_cplex_solution(io.StringIO("<CPLEXSolution><header/></CPLEXSolution>"))

        assert solution.status == Status.OPTIMAL
        assert solution.results == {}

    def test_stops_after_variables(self):
        """Content after the variables section is never read."""
        text = (
            '<CPLEXSolution><variables><variable name="a" value="1"/></variables>'
            "<garbage <<<"
        )
        solution = read_cplex_solution(io.StringIO(text))
        assert solution.results == {"a": 1.0}

    def test_unterminated_variables(self):
        text = '<CPLEXSolution><variables><variable name="a" value="1"/>'
        with pytest.raises(FormatError, match="Unterminated variables section"):
            read_cplex_solution(io.StringIO(text))

    def test_invalid_value(self):
        text = '<CPLEXSolution><variables><variable name="a" value="oops"/></variables></CPLEXSolution>'
        with pytest.raises(ParseError) as exc_info:
            read_cplex_solution(io.StringIO(text))

        assert exc_info.value.field == "a"
        assert exc_info.value.value == "oops"

    def test_missing_attribute(self):
        text = '<CPLEXSolution><variables><variable name="a"/></variables></CPLEXSolution>'
        with pytest.raises(FormatError):
            read_cplex_solution(io.StringIO(text))

    def test_malformed_xml(self):
        with pytest.raises(FormatError):
            read_cplex_solution(io.StringIO("<CPLEXSolution><variables></header>"))

    def test_stdout_status(self):
        assert CplexSolver().parse_stdout_status("MIP - Integer infeasible.\nNo solution exists.\n") == Status.INFEASIBLE
        assert CplexSolver().parse_stdout_status("Solution written\n") is None
