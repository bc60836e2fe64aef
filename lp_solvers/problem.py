"""
Concrete problem model using Pydantic.

Immutable value objects implementing the interfaces of lp_solvers.lp_format:
StrExpression and LinearExpression are two interchangeable expression shapes,
Variable, Constraint and Problem hold the rest of the model.

Example:
    >>> problem = Problem(
    ...     name="my_problem",
    ...     sense="minimize",
    ...     objective="2 x + y",
    ...     variables=[
    ...         Variable.free("x"),
    ...         Variable(name="y", lower_bound=0),
    ...         Variable(name="z", lower_bound=1, upper_bound=10),
    ...     ],
    ...     constraints=[Constraint(lhs="x + y + z", operator=">=", rhs=5)],
    ... )
"""

import math
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from .lp_format import LpExpression, Operator, Sense, format_number, render


Number = Union[int, float]


class StrExpression(BaseModel):
    """A string that is already a valid .lp expression for the target solver."""

    text: str = Field(..., description="Pre-formatted expression, e.g. '2 x + y'")

    def __init__(self, text: str = None, **data):
        if text is not None:
            data["text"] = text
        super().__init__(**data)

    def to_lp_file_format(self) -> str:
        return self.text

    def __str__(self) -> str:
        return self.text

    class Config:
        frozen = True


class LinearExpression(BaseModel):
    """
    Sum of `coefficient * variable` terms plus a constant.

    Terms keep first-seen order; adding a term on a variable that is already
    present merges the coefficients.

    Example:
        >>> x, y = Variable(name="x"), Variable(name="y")
        >>> (2 * x - y + 3).to_lp_file_format()
        '2 x - y + 3'
    """

    terms: Tuple[Tuple[str, float], ...] = Field(
        default=(),
        description="(variable name, coefficient) pairs"
    )
    constant: float = Field(default=0.0, description="Constant offset")

    @classmethod
    def of(cls, value: Any) -> "LinearExpression":
        """Convert a number, Variable or LinearExpression to a LinearExpression."""
        if isinstance(value, LinearExpression):
            return value
        if isinstance(value, Variable):
            return cls(terms=((value.name, 1.0),))
        if isinstance(value, (int, float)):
            return cls(constant=float(value))
        raise TypeError(f"Cannot use {type(value).__name__} in a linear expression")

    def _combine(self, other: Any, factor: float) -> "LinearExpression":
        other = LinearExpression.of(other)
        coefficients: Dict[str, float] = dict(self.terms)
        for name, coefficient in other.terms:
            coefficients[name] = coefficients.get(name, 0.0) + factor * coefficient
        return LinearExpression(
            terms=tuple(coefficients.items()),
            constant=self.constant + factor * other.constant,
        )

    def scaled(self, factor: float) -> "LinearExpression":
        return LinearExpression(
            terms=tuple((name, factor * c) for name, c in self.terms),
            constant=factor * self.constant,
        )

    def __add__(self, other):
        return self._combine(other, 1.0)

    def __radd__(self, other):
        return self._combine(other, 1.0)

    def __sub__(self, other):
        return self._combine(other, -1.0)

    def __rsub__(self, other):
        return LinearExpression.of(other)._combine(self, -1.0)

    def __mul__(self, factor):
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return self.scaled(float(factor))

    __rmul__ = __mul__

    def __neg__(self):
        return self.scaled(-1.0)

    def to_lp_file_format(self) -> str:
        pieces: List[str] = []
        for name, coefficient in self.terms:
            if coefficient == 0:
                continue
            magnitude = abs(coefficient)
            term = name if magnitude == 1 else f"{format_number(magnitude)} {name}"
            if not pieces:
                pieces.append(term if coefficient > 0 else f"- {term}")
            else:
                pieces.append(f"{'+' if coefficient > 0 else '-'} {term}")
        if self.constant != 0 or not pieces:
            magnitude = format_number(abs(self.constant))
            if not pieces:
                pieces.append(magnitude if self.constant >= 0 else f"- {magnitude}")
            else:
                pieces.append(f"{'+' if self.constant > 0 else '-'} {magnitude}")
        return " ".join(pieces)

    def __str__(self) -> str:
        return self.to_lp_file_format()

    class Config:
        frozen = True


class Variable(BaseModel):
    """
    A variable to optimize.

    Bounds default to -inf/+inf (a free variable). The name must be unique
    in its problem and valid for the solver.
    """

    name: str = Field(..., description="Variable name (e.g., 'x1')")
    is_integer: bool = Field(default=False, description="Restrict to integer values")
    lower_bound: float = Field(default=-math.inf, description="-inf if no lower bound")
    upper_bound: float = Field(default=math.inf, description="+inf if no upper bound")

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        """Accept the `bounds: [lb, ub]` and `type: integer|binary` shorthands."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "bounds" in data:
            bounds = data.pop("bounds")
            try:
                lower, upper = bounds
            except (TypeError, ValueError):
                raise ValueError(f"bounds must be a [lower, upper] pair, got {bounds!r}") from None
            data["lower_bound"] = -math.inf if lower is None else lower
            data["upper_bound"] = math.inf if upper is None else upper
        var_type = data.pop("type", None)
        if var_type == "integer":
            data["is_integer"] = True
        elif var_type == "binary":
            data["is_integer"] = True
            data.setdefault("lower_bound", 0.0)
            data.setdefault("upper_bound", 1.0)
        elif var_type not in (None, "continuous"):
            raise ValueError(f"Unknown variable type: {var_type!r}")
        for key in ("lower_bound", "upper_bound"):
            if data.get(key, 0.0) is None:
                data.pop(key)
        return data

    @model_validator(mode="after")
    def _check_bounds(self) -> "Variable":
        if math.isnan(self.lower_bound) or math.isnan(self.upper_bound):
            raise ValueError(f"Invalid bounds for {self.name}: NaN is not a bound")
        if self.lower_bound > self.upper_bound:
            raise ValueError(
                f"Invalid bounds for {self.name}: lower ({self.lower_bound}) > upper ({self.upper_bound})"
            )
        return self

    @classmethod
    def free(cls, name: str, is_integer: bool = False) -> "Variable":
        return cls(name=name, is_integer=is_integer)

    @classmethod
    def continuous(cls, name: str, lower_bound: float = -math.inf, upper_bound: float = math.inf) -> "Variable":
        return cls(name=name, lower_bound=lower_bound, upper_bound=upper_bound)

    @classmethod
    def integer(cls, name: str, lower_bound: float = -math.inf, upper_bound: float = math.inf) -> "Variable":
        return cls(name=name, is_integer=True, lower_bound=lower_bound, upper_bound=upper_bound)

    @classmethod
    def binary(cls, name: str) -> "Variable":
        return cls(name=name, is_integer=True, lower_bound=0.0, upper_bound=1.0)

    def to_lp_file_format(self) -> str:
        return self.name

    # Arithmetic builds LinearExpressions
    def __add__(self, other):
        return LinearExpression.of(self) + other

    def __radd__(self, other):
        return LinearExpression.of(other) + self

    def __sub__(self, other):
        return LinearExpression.of(self) - other

    def __rsub__(self, other):
        return LinearExpression.of(other) - self

    def __mul__(self, factor):
        if not isinstance(factor, (int, float)):
            return NotImplemented
        return LinearExpression.of(self) * factor

    __rmul__ = __mul__

    def __neg__(self):
        return -LinearExpression.of(self)

    class Config:
        frozen = True


def _as_expression(value: Any) -> Any:
    if isinstance(value, str):
        return StrExpression(value)
    if isinstance(value, (int, float)):
        return LinearExpression.of(value)
    if not isinstance(value, LpExpression):
        raise ValueError(f"{type(value).__name__} cannot be written as an .lp expression")
    return value


class Constraint(BaseModel):
    """`lhs operator rhs`, with rhs a plain number."""

    lhs: Any = Field(..., description="Left hand side expression")
    operator: Operator = Field(..., description="'<=', '=' or '>='")
    rhs: float = Field(..., description="Right hand side constant")

    @field_validator("lhs", mode="before")
    @classmethod
    def _coerce_lhs(cls, v):
        return _as_expression(v)

    @field_validator("operator", mode="before")
    @classmethod
    def _coerce_operator(cls, v):
        return Operator.parse(v)

    class Config:
        frozen = True


class Problem(BaseModel):
    """
    A complete linear problem.

    Variable and constraint order is preserved and determines the layout of
    the generated .lp file.
    """

    name: str = Field(default="lp_solvers_problem", description="Problem name, used as file stem")
    sense: Sense = Field(default=Sense.MINIMIZE, description="Minimize or Maximize")
    objective: Any = Field(..., description="Objective expression")
    variables: Tuple[Variable, ...] = Field(default=(), description="Variables of the problem")
    constraints: Tuple[Constraint, ...] = Field(default=(), description="Constraints to apply")

    @field_validator("name")
    @classmethod
    def _check_name(cls, v):
        """The name prefixes the temporary .lp file, so it cannot hold a path."""
        if "/" in v or "\\" in v:
            raise ValueError(f"Problem name cannot contain path separators: {v!r}")
        return v

    @field_validator("sense", mode="before")
    @classmethod
    def _coerce_sense(cls, v):
        return Sense.parse(v)

    @field_validator("objective", mode="before")
    @classmethod
    def _coerce_objective(cls, v):
        return _as_expression(v)

    @model_validator(mode="after")
    def _check_unique_names(self) -> "Problem":
        seen = set()
        for variable in self.variables:
            if variable.name in seen:
                raise ValueError(f"Duplicate variable name: {variable.name}")
            seen.add(variable.name)
        return self

    @property
    def n_variables(self) -> int:
        return len(self.variables)

    @property
    def n_constraints(self) -> int:
        return len(self.constraints)

    def variable_names(self) -> List[str]:
        return [v.name for v in self.variables]

    def get_variable(self, name: str) -> Optional[Variable]:
        for variable in self.variables:
            if variable.name == name:
                return variable
        return None

    def to_lp(self) -> str:
        """Return the problem as .lp text."""
        return render(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Problem":
        """
        Build a problem from plain data (parsed YAML or JSON).

        Schema:
        {
          "name": "diet",
          "sense": "minimize",
          "objective": "2 x + y",
          "variables": [{"name": "x", "bounds": [0, null], "type": "integer"}],
          "constraints": [{"lhs": "x + y", "operator": ">=", "rhs": 5}]
        }
        """
        return cls.model_validate(data)

    class Config:
        frozen = True
