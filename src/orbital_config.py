from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path

try:
    import tomllib  # py>=3.11
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib

from orbital_density import Orbital, resolve_orbital
from orbital_sampler import (
    DEFAULT_ACCEPTANCE_SCALE,
    DEFAULT_BATCH_SIZE,
    DEFAULT_TRIALS,
    validate_parameters,
)


@dataclass(frozen=True)
class SamplerConfig:
    orbital: object = Orbital.D_Z2
    trials: int = DEFAULT_TRIALS
    r_max: float = 1.0
    acceptance_scale: float = DEFAULT_ACCEPTANCE_SCALE
    seed: int | None = None
    workers: int = 1
    batch_size: int = DEFAULT_BATCH_SIZE

    def __post_init__(self):
        # accept selector strings from TOML / argparse
        object.__setattr__(self, "orbital", resolve_orbital(self.orbital))

    def validate(self) -> "SamplerConfig":
        validate_parameters(
            self.trials, self.r_max, self.acceptance_scale, self.workers, self.batch_size, self.seed
        )
        return self

    def with_overrides(self, **overrides) -> "SamplerConfig":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


_KEYS = {f.name for f in fields(SamplerConfig)}


def load_config(path) -> SamplerConfig:
    """Read the [sampling] table of a TOML file into a SamplerConfig.

    Example::

        [sampling]
        orbital = "3d_xy"
        trials = 1_000_000
        r_max = 1.0
        acceptance_scale = 0.08
        seed = 42
    """
    p = Path(path)
    with p.open("rb") as fh:
        data = tomllib.load(fh)
    section = data.get("sampling", {}) or {}
    unknown = sorted(set(section) - _KEYS)
    if unknown:
        raise ValueError(f"Unknown [sampling] keys in {p}: {', '.join(unknown)}")
    return SamplerConfig(**section)
