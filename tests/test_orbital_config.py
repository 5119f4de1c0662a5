import pytest

from orbital_config import SamplerConfig, load_config
from orbital_density import HydrogenOrbital, Orbital
from orbital_sampler import (
    DEFAULT_ACCEPTANCE_SCALE,
    DEFAULT_TRIALS,
    InvalidParameterError,
    run_sampler,
)


def test_defaults():
    cfg = SamplerConfig()
    assert cfg.orbital is Orbital.D_Z2
    assert cfg.trials == DEFAULT_TRIALS == 100_000_000
    assert cfg.acceptance_scale == DEFAULT_ACCEPTANCE_SCALE == 0.08
    assert cfg.r_max == 1.0
    assert cfg.seed is None


def test_load_sampling_table(tmp_path):
    path = tmp_path / "orbital.toml"
    path.write_text(
        "[sampling]\n"
        'orbital = "hydrogen:3,2,0"\n'
        "trials = 1_000\n"
        "r_max = 25.0\n"
        "acceptance_scale = 500.0\n"
        "seed = 42\n"
        "workers = 2\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.orbital == HydrogenOrbital(3, 2, 0)
    assert cfg.trials == 1000
    assert cfg.r_max == 25.0
    assert cfg.acceptance_scale == 500.0
    assert cfg.seed == 42
    assert cfg.workers == 2


def test_missing_section_gives_defaults(tmp_path):
    path = tmp_path / "empty.toml"
    path.write_text("[other]\nx = 1\n", encoding="utf-8")
    assert load_config(path) == SamplerConfig()


def test_unknown_keys_rejected(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text("[sampling]\ntrails = 10\n", encoding="utf-8")
    with pytest.raises(ValueError, match="trails"):
        load_config(path)


def test_unknown_orbital_rejected(tmp_path):
    path = tmp_path / "bad.toml"
    path.write_text('[sampling]\norbital = "5g"\n', encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_with_overrides_skips_none():
    cfg = SamplerConfig(trials=10, seed=1).with_overrides(trials=None, seed=5, orbital="3d_xy")
    assert cfg.trials == 10
    assert cfg.seed == 5
    assert cfg.orbital is Orbital.D_XY


def test_validate_reports_invalid_parameter():
    with pytest.raises(InvalidParameterError):
        SamplerConfig(acceptance_scale=0.0).validate()
    assert SamplerConfig(trials=0).validate().trials == 0


def test_run_sampler_reports_stats():
    cfg = SamplerConfig(orbital="3d_z2", trials=30_000, seed=3, workers=2, batch_size=4_000)
    cloud, stats = run_sampler(cfg)
    assert stats.orbital == "3d_z2"
    assert stats.trials == stats.attempted == 30_000
    assert stats.accepted == cloud.size // 3
    assert not stats.stopped_early
    assert 0.0 < stats.acceptance_rate < 1.0
