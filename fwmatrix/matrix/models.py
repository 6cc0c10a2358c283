"""Build matrix models: axes, jobs, include/exclude rules and resolved jobs."""

import math
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import Field, field_validator, model_validator

from fwmatrix.core.errors import (
    EmptyExcludeError,
    MatrixDefinitionError,
    UnknownAxisError,
)
from fwmatrix.models.base import FwMatrixBaseModel


RESERVED_MATRIX_KEYS = ("include", "exclude")


def coerce_scalar(value: Any) -> str:
    """Render a YAML scalar the way a workflow expression would see it."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, int | float):
        return str(value)
    raise ValueError(f"expected a scalar value, got {type(value).__name__}: {value!r}")


def _is_expression(value: Any) -> bool:
    return isinstance(value, str) and "${{" in value


@dataclass(frozen=True)
class Axis:
    """A named configuration dimension with ordered values."""

    name: str
    values: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.values)


class AxisSet:
    """Ordered collection of matrix axes.

    Axes keep their declaration order; the first axis varies slowest during
    cartesian expansion.
    """

    def __init__(self, axes: Iterable[Axis] = ()) -> None:
        self._axes: dict[str, Axis] = {}
        for axis in axes:
            if axis.name in self._axes:
                raise MatrixDefinitionError(f"Axis '{axis.name}' declared twice")
            self._axes[axis.name] = axis

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> "AxisSet":
        return cls(Axis(name, tuple(values)) for name, values in mapping.items())

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._axes)

    @property
    def size(self) -> int:
        """Number of combinations in the cartesian product."""
        if not self._axes:
            return 0
        return math.prod(len(axis) for axis in self._axes.values())

    def values(self, axis: str) -> tuple[str, ...]:
        """Return the ordered values of ``axis``.

        Raises:
            UnknownAxisError: If ``axis`` was never declared
        """
        return self.get(axis).values

    def get(self, axis: str) -> Axis:
        try:
            return self._axes[axis]
        except KeyError:
            raise UnknownAxisError(axis, self.names) from None

    def require(self, names: Iterable[str]) -> None:
        """Raise UnknownAxisError for the first name that is not an axis."""
        for name in names:
            if name not in self._axes:
                raise UnknownAxisError(name, self.names)

    def __contains__(self, axis: object) -> bool:
        return axis in self._axes

    def __iter__(self) -> Iterator[Axis]:
        return iter(self._axes.values())

    def __len__(self) -> int:
        return len(self._axes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AxisSet):
            return NotImplemented
        return list(self._axes.values()) == list(other._axes.values())

    def __repr__(self) -> str:
        inner = ", ".join(f"{a.name}={list(a.values)}" for a in self)
        return f"AxisSet({inner})"


@dataclass
class Job:
    """A single build combination.

    ``values`` holds the selected value per axis. Axes absent from ``values``
    are unset; this only happens for jobs introduced by an include rule.
    ``attributes`` holds derived data (``target``, ``boot``...) in insertion
    order.
    """

    values: dict[str, str]
    attributes: dict[str, str] = field(default_factory=dict)

    def copy(self) -> "Job":
        return Job(values=dict(self.values), attributes=dict(self.attributes))

    def matches(self, assignment: Mapping[str, str]) -> bool:
        """True when every axis in ``assignment`` is set here to the same value."""
        return all(
            axis in self.values and self.values[axis] == value
            for axis, value in assignment.items()
        )

    @property
    def key(self) -> tuple[tuple[str, str], ...]:
        """Identity of the job: its sorted axis assignment."""
        return tuple(sorted(self.values.items()))


@dataclass(frozen=True)
class IncludeRule:
    """Forced combination: axis values to match plus attributes to attach."""

    values: dict[str, str]
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_entry(cls, entry: Mapping[str, str], axis_set: AxisSet) -> "IncludeRule":
        """Split an include entry into axis values and extra attributes."""
        values = {k: v for k, v in entry.items() if k in axis_set}
        attributes = {k: v for k, v in entry.items() if k not in axis_set}
        return cls(values=values, attributes=attributes)

    def as_entry(self) -> dict[str, str]:
        return {**self.values, **self.attributes}


@dataclass(frozen=True)
class ExcludeRule:
    """Partial axis assignment; unnamed axes are wildcards."""

    values: dict[str, str]

    @classmethod
    def from_entry(
        cls,
        entry: Mapping[str, str],
        axis_set: AxisSet,
        *,
        match_all: bool = False,
    ) -> "ExcludeRule":
        """Build a rule, rejecting keys that do not name a declared axis.

        An empty rule matches every job; it is only accepted with
        ``match_all`` (allow-failure rules).

        Raises:
            UnknownAxisError: If the entry names an undeclared axis
            EmptyExcludeError: If the entry is empty and ``match_all`` is unset
        """
        if not entry and not match_all:
            raise EmptyExcludeError()
        axis_set.require(entry)
        return cls(values=dict(entry))


@dataclass(frozen=True)
class MatchedExisting:
    """Include decision: merge attributes into the jobs at ``indices``."""

    indices: tuple[int, ...]


@dataclass(frozen=True)
class NoMatch:
    """Include decision: no job matched, append the rule as a new job."""


MergeDecision = MatchedExisting | NoMatch


class MatrixConfig(FwMatrixBaseModel):
    """Raw matrix declaration as read from YAML.

    Accepts the GitHub Actions ``strategy.matrix`` syntax under ``matrix``:
    every key other than ``include``/``exclude`` is an axis.
    """

    axes: dict[str, list[str]] = Field(default_factory=dict)
    include: list[dict[str, str]] = Field(default_factory=list)
    exclude: list[dict[str, str]] = Field(default_factory=list)
    routing_attributes: list[str] = Field(
        default_factory=list, alias="routing-attributes"
    )
    allow_failure: list[dict[str, str]] = Field(
        default_factory=list, alias="allow-failure"
    )

    @model_validator(mode="before")
    @classmethod
    def split_matrix_block(cls, data: Any) -> Any:
        if not isinstance(data, Mapping) or "matrix" not in data:
            return data

        data = dict(data)
        matrix = data.pop("matrix") or {}
        if _is_expression(matrix):
            raise ValueError("matrix expressions are not supported")
        if not isinstance(matrix, Mapping):
            raise ValueError("'matrix' must be a mapping of axis names to values")

        data["axes"] = {
            k: v for k, v in matrix.items() if k not in RESERVED_MATRIX_KEYS
        }
        data["include"] = matrix.get("include") or []
        data["exclude"] = matrix.get("exclude") or []
        return data

    @field_validator("axes", mode="before")
    @classmethod
    def normalize_axes(cls, v: Any) -> dict[str, list[str]]:
        if _is_expression(v):
            raise ValueError("matrix expressions are not supported")
        if not isinstance(v, Mapping):
            raise ValueError("axes must be a mapping of axis names to value lists")

        axes: dict[str, list[str]] = {}
        for name, values in v.items():
            if _is_expression(values):
                raise ValueError(f"axis '{name}' uses an expression, list its values")
            if not isinstance(values, list):
                raise ValueError(f"axis '{name}' must be a list of values")
            if not values:
                raise ValueError(f"axis '{name}' has no values")
            rendered = [coerce_scalar(value) for value in values]
            duplicates = sorted({x for x in rendered if rendered.count(x) > 1})
            if duplicates:
                raise ValueError(f"axis '{name}' repeats values: {duplicates}")
            axes[str(name).strip()] = rendered
        return axes

    @field_validator("include", "exclude", "allow_failure", mode="before")
    @classmethod
    def normalize_rules(cls, v: Any) -> list[dict[str, str]]:
        if v is None:
            return []
        if _is_expression(v):
            raise ValueError("rule expressions are not supported")
        if not isinstance(v, list):
            raise ValueError("rules must be a list of mappings")

        rules: list[dict[str, str]] = []
        for entry in v:
            if not isinstance(entry, Mapping):
                raise ValueError(f"rule must be a mapping, got {entry!r}")
            rules.append(
                {
                    str(key).strip(): "" if value is None else coerce_scalar(value)
                    for key, value in entry.items()
                }
            )
        return rules


@dataclass(frozen=True)
class MatrixDefinition:
    """Immutable, validated matrix ready for resolution."""

    axis_set: AxisSet
    include: tuple[IncludeRule, ...] = ()
    exclude: tuple[ExcludeRule, ...] = ()
    routing_attributes: tuple[str, ...] = ()
    allow_failure: tuple[ExcludeRule, ...] = ()

    @classmethod
    def from_config(cls, config: MatrixConfig) -> "MatrixDefinition":
        """Build a definition from a validated raw declaration.

        Raises:
            UnknownAxisError: If an exclude or allow-failure rule names an
                undeclared axis
            EmptyExcludeError: If an exclude rule names no axis
        """
        axis_set = AxisSet.from_mapping(config.axes)
        return cls(
            axis_set=axis_set,
            include=tuple(IncludeRule.from_entry(e, axis_set) for e in config.include),
            exclude=tuple(ExcludeRule.from_entry(e, axis_set) for e in config.exclude),
            routing_attributes=tuple(config.routing_attributes),
            allow_failure=tuple(
                ExcludeRule.from_entry(e, axis_set, match_all=True)
                for e in config.allow_failure
            ),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MatrixDefinition":
        """Validate a plain mapping (standalone file layout) into a definition."""
        return cls.from_config(MatrixConfig.model_validate(data))


class ResolvedJob(FwMatrixBaseModel):
    """Final, fully attributed build unit handed to external tooling."""

    values: dict[str, str]
    attributes: dict[str, str] = Field(default_factory=dict)
    features: str
    target_triple: str
    vendor_alias: str | None = None
    bootloader_id: str | None = None
    allow_failure: bool = False

    @property
    def name(self) -> str:
        return " / ".join(self.values.values())

    def to_record(self) -> dict[str, Any]:
        """Outbound record for the build collaborator."""
        return {
            "feature_flag_string": self.features,
            "target_triple": self.target_triple,
            "vendor_alias": self.vendor_alias,
            "bootloader_id": self.bootloader_id,
        }

    def to_matrix_entry(self) -> dict[str, Any]:
        """Flat entry usable in a dynamic ``fromJSON`` workflow matrix."""
        return {
            **self.values,
            **self.attributes,
            "features": self.features,
            "allow_failure": self.allow_failure,
        }
