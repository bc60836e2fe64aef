"""
Tests for solver configuration and command line construction.
"""

import math
from pathlib import Path

import pytest

from lp_solvers.config import SolverOptions, command_for
from lp_solvers.exceptions import ConfigError
from lp_solvers.solvers import CbcSolver, CplexSolver, GlpkSolver, GurobiSolver

LP = Path("/tmp/problem.lp")
SOL = Path("/tmp/problem.sol")


class TestArguments:
    """Test the argument vector of each solver."""

    def test_cbc_defaults(self):
        assert CbcSolver().arguments(LP, SOL) == [str(LP), "solve", "solution", str(SOL)]

    def test_cbc_all_options(self):
        solver = CbcSolver().with_mip_gap(0.05).with_max_seconds(10).with_nb_threads(4)

        assert solver.arguments(LP, SOL) == [
            str(LP),
            "ratiogap", "0.05",
            "seconds", "10",
            "threads", "4",
            "solve", "solution", str(SOL),
        ]

    def test_glpk(self):
        solver = GlpkSolver().with_max_seconds(30).with_mip_gap(0.5)

        assert GlpkSolver().arguments(LP, SOL) == ["--lp", str(LP), "-o", str(SOL)]
        assert solver.arguments(LP, SOL) == [
            "--lp", str(LP), "-o", str(SOL), "--tmlim", "30", "--mipgap", "0.5",
        ]

    def test_gurobi(self):
        assert GurobiSolver().arguments(LP, SOL) == [f"ResultFile={SOL}", str(LP)]
        assert GurobiSolver().with_mip_gap(0.05).arguments(LP, SOL) == [
            f"ResultFile={SOL}", "MIPGap=0.05", str(LP),
        ]

    def test_cplex(self):
        assert CplexSolver().arguments(LP, SOL) == [
            "-c", f'READ "{LP}"', "optimize", f'WRITE "{SOL}"',
        ]
        assert CplexSolver().with_mip_gap(0.01).arguments(LP, SOL) == [
            "-c", f'READ "{LP}"', "set mip tolerances mipgap 0.01", "optimize", f'WRITE "{SOL}"',
        ]

    def test_cplex_solution_suffix(self):
        assert CplexSolver().solution_suffix() == ".sol"
        assert CbcSolver().solution_suffix() is None


class TestSetters:
    """Test that setters validate and leave the original solver unchanged."""

    def test_setters_return_new_solver(self):
        base = CbcSolver()
        configured = base.with_max_seconds(5)

        assert configured is not base
        assert configured.max_seconds == 5
        assert base.max_seconds is None

    def test_with_command_name(self):
        solver = GlpkSolver().with_command_name("/opt/glpk/bin/glpsol")

        assert solver.command_name == "/opt/glpk/bin/glpsol"
        assert GlpkSolver().command_name == "glpsol"

    def test_with_temp_solution_file(self, tmp_path):
        solver = CbcSolver().with_temp_solution_file(tmp_path / "out.sol")

        assert solver.preferred_temp_solution_file() == tmp_path / "out.sol"
        assert CbcSolver().preferred_temp_solution_file() is None

    @pytest.mark.parametrize("gap", [0.0, -0.1, math.inf, math.nan])
    def test_invalid_gap(self, gap):
        for solver in (CbcSolver(), GlpkSolver(), GurobiSolver(), CplexSolver()):
            with pytest.raises(ConfigError) as exc_info:
                solver.with_mip_gap(gap)
            assert exc_info.value.option == "mip_gap"

    @pytest.mark.parametrize("seconds", [0, -5])
    def test_invalid_seconds(self, seconds):
        with pytest.raises(ConfigError):
            CbcSolver().with_max_seconds(seconds)

    def test_invalid_threads(self):
        with pytest.raises(ConfigError):
            CbcSolver().with_nb_threads(0)

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            GlpkSolver().with_mip_gap(-1)

    def test_unsupported_options_have_no_setter(self):
        assert not hasattr(GurobiSolver(), "with_max_seconds")
        assert not hasattr(GlpkSolver(), "with_nb_threads")
        assert not hasattr(CplexSolver(), "with_nb_threads")

    def test_get_info(self):
        info = CbcSolver().with_nb_threads(2).get_info()

        assert info["name"] == "Cbc"
        assert info["command"] == "cbc"
        assert info["options"] == {"threads": 2}


class TestOptions:
    """Test SolverOptions and command lookup."""

    def test_defaults(self):
        options = SolverOptions()

        assert options.max_seconds is None
        assert options.threads is None
        assert options.mip_gap is None
        assert options.to_dict() == {}

    def test_updated_keeps_other_values(self):
        options = SolverOptions(max_seconds=10).updated(mip_gap=0.1)
        assert options.to_dict() == {"max_seconds": 10, "mip_gap": 0.1}

    def test_command_from_environment(self, monkeypatch):
        monkeypatch.setenv("LP_SOLVERS_CBC_COMMAND", "/usr/local/bin/cbc")

        assert command_for("cbc") == "/usr/local/bin/cbc"
        assert CbcSolver().command_name == "/usr/local/bin/cbc"

    def test_default_commands(self, monkeypatch):
        for key in ("CBC", "GLPK", "GUROBI", "CPLEX"):
            monkeypatch.delenv(f"LP_SOLVERS_{key}_COMMAND", raising=False)

        assert [command_for(k) for k in ("cbc", "glpk", "gurobi", "cplex")] == [
            "cbc", "glpsol", "gurobi_cl", "cplex",
        ]
