"""argsense/config.py – Tuning knobs for the inference driver."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, List, Mapping, Optional, Tuple

from .errors import ConfigError

#: Pass names understood by the driver, in their default order.
PASSES: Tuple[str, ...] = ("left", "right", "positional")


@dataclass
class InferenceConfig:
    """Tuning knobs for :func:`argsense.inference.classify`."""

    #: ``None`` bounds the run by the candidate count, which always suffices.
    max_sweeps: Optional[int] = None
    pass_order: Tuple[str, ...] = PASSES
    raise_on_error: bool = True

    def validate(self) -> List[str]:
        """Return a list of validation problems (empty if valid)."""
        problems: List[str] = []
        if self.max_sweeps is not None and self.max_sweeps <= 0:
            problems.append("max_sweeps must be positive")
        if not self.pass_order:
            problems.append("pass_order must name at least one pass")
        unknown = [p for p in self.pass_order if p not in PASSES]
        if unknown:
            problems.append(
                f"unknown pass(es) {', '.join(unknown)}; expected {', '.join(PASSES)}"
            )
        if len(set(self.pass_order)) != len(self.pass_order):
            problems.append("pass_order lists a pass more than once")
        return problems

    def check(self) -> "InferenceConfig":
        """Raise :class:`ConfigError` unless :meth:`validate` is clean."""
        problems = self.validate()
        if problems:
            raise ConfigError("; ".join(problems))
        return self

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "InferenceConfig":
        """Build a checked config from a plain mapping.

        ``None`` values are skipped so CLI flags left unset keep their
        defaults.  ``pass_order`` may be a comma-separated string.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(k for k in values if k not in known)
        if unknown:
            raise ConfigError(f"unknown config key(s): {', '.join(unknown)}")

        kwargs = {k: v for k, v in values.items() if v is not None}
        order = kwargs.get("pass_order")
        if isinstance(order, str):
            kwargs["pass_order"] = tuple(p.strip() for p in order.split(",") if p.strip())
        elif order is not None:
            kwargs["pass_order"] = tuple(order)
        if "max_sweeps" in kwargs:
            try:
                kwargs["max_sweeps"] = int(kwargs["max_sweeps"])
            except (TypeError, ValueError) as exc:
                raise ConfigError(
                    f"max_sweeps must be an integer, got {kwargs['max_sweeps']!r}",
                    cause=exc,
                ) from exc
        return cls(**kwargs).check()
