"""
Solver registry.

Central registration and lookup of solver backends by name, used by the
command line and available to applications adding their own solvers.
"""

from typing import Dict, List, Optional, Any, TYPE_CHECKING
import logging

if TYPE_CHECKING:
    from .base import SolverProgram

logger = logging.getLogger(__name__)


class SolverRegistry:
    """
    Registry for solver backends.

    Provides:
    - Solver registration
    - Lookup by name (case-insensitive)
    - Listing of available solvers (probed on this machine)
    - Lazy initialization of the built-in solvers

    Usage:
        registry = SolverRegistry()
        solver = registry.get("cbc")
        registry.register(MySolver())
    """

    def __init__(self):
        """Initialize empty registry."""
        self._solvers: Dict[str, "SolverProgram"] = {}
        self._initialized = False

    def register(self, solver: "SolverProgram") -> None:
        """
        Register a solver under its key (or lower-cased name).

        Built-in solvers are registered first, so a custom solver can replace
        one of them.

        Args:
            solver: Solver instance to register
        """
        self._ensure_initialized()
        key = (getattr(solver, "key", "") or solver.name).lower()
        self._solvers[key] = solver
        logger.debug(f"Registered solver: {key}")

    def get(self, name: str) -> Optional["SolverProgram"]:
        """
        Get solver by name.

        Args:
            name: Solver key, e.g. "cbc" or "Gurobi"

        Returns:
            Solver instance or None if not found
        """
        self._ensure_initialized()
        return self._solvers.get(name.lower())

    def names(self) -> List[str]:
        self._ensure_initialized()
        return list(self._solvers)

    def get_available(self) -> List[str]:
        """
        Get names of solvers that can run on this machine.

        Each solver is probed by solving a one-variable problem.
        """
        self._ensure_initialized()
        return [
            name for name, solver in self._solvers.items()
            if solver.is_available()
        ]

    def list_all(self) -> Dict[str, Dict[str, Any]]:
        """
        List all solvers with their configuration and availability.

        Returns:
            Dict mapping solver name to info dict
        """
        self._ensure_initialized()

        result = {}
        for name, solver in self._solvers.items():
            info = solver.get_info()
            info["available"] = solver.is_available()
            result[name] = info
        return result

    def _ensure_initialized(self) -> None:
        """Lazy initialization of solvers."""
        if not self._initialized:
            # Set first: _initialize_solvers registers through register()
            self._initialized = True
            self._initialize_solvers()

    def _initialize_solvers(self) -> None:
        """Register the built-in solvers in default preference order."""
        from .auto import default_solvers

        for solver in default_solvers():
            self.register(solver)

        logger.info(f"Initialized {len(self._solvers)} solvers")


# Global registry instance
_REGISTRY: Optional[SolverRegistry] = None


def get_registry() -> SolverRegistry:
    """Get the global solver registry."""
    global _REGISTRY
    if _REGISTRY is None:
        _REGISTRY = SolverRegistry()
    return _REGISTRY


def get_solver(name: str) -> Optional["SolverProgram"]:
    """Get solver by name (convenience function)."""
    return get_registry().get(name)


def list_solvers() -> Dict[str, Dict[str, Any]]:
    """List all solvers with info and availability (convenience function)."""
    return get_registry().list_all()


def get_available_solvers() -> List[str]:
    """Get names of installed solvers (convenience function)."""
    return get_registry().get_available()


def register_solver(solver: "SolverProgram") -> None:
    """Register a custom solver (convenience function)."""
    get_registry().register(solver)
