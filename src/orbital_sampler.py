"""Rejection sampling of orbital densities into a flat float32 point cloud.

Candidates are drawn uniformly over the (r, theta, phi) parameter box, not
uniformly in volume. The r^2 in the radial factor already carries the volume
weighting, so the accepted points follow the radial probability density.
"""
import logging
import math
import numbers
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np
from tqdm import tqdm

from orbital_density import resolve_orbital

logger = logging.getLogger(__name__)

DEFAULT_TRIALS = 100_000_000
DEFAULT_ACCEPTANCE_SCALE = 0.08
DEFAULT_BATCH_SIZE = 1_000_000


class InvalidParameterError(ValueError):
    """Sampling parameters rejected before any trial is drawn."""


@dataclass(frozen=True)
class SampleStats:
    orbital: str
    trials: int
    attempted: int
    accepted: int
    stopped_early: bool

    @property
    def acceptance_rate(self):
        return self.accepted / self.attempted if self.attempted else 0.0


def _is_int(value):
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)


def _is_real(value):
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def validate_parameters(trials, r_max, acceptance_scale, workers=1, batch_size=DEFAULT_BATCH_SIZE, seed=None):
    if not _is_int(trials):
        raise InvalidParameterError(f"trials must be an integer, got {trials!r}")
    if trials < 0:
        raise InvalidParameterError(f"trials must be >= 0, got {trials}")
    if not (_is_real(r_max) and math.isfinite(r_max) and r_max > 0):
        raise InvalidParameterError(f"r_max must be a positive finite number, got {r_max!r}")
    if not (_is_real(acceptance_scale) and math.isfinite(acceptance_scale) and acceptance_scale > 0):
        raise InvalidParameterError(
            f"acceptance_scale must be a positive finite number, got {acceptance_scale!r}"
        )
    if not _is_int(workers) or workers < 1:
        raise InvalidParameterError(f"workers must be an integer >= 1, got {workers!r}")
    if not _is_int(batch_size) or batch_size < 1:
        raise InvalidParameterError(f"batch_size must be an integer >= 1, got {batch_size!r}")
    # default_rng only takes non-negative integer seeds
    if seed is not None and (not _is_int(seed) or seed < 0):
        raise InvalidParameterError(f"seed must be a non-negative integer, got {seed!r}")


def to_cartesian(r, theta, phi):
    # Convert spherical → cartesian
    x = r * np.sin(theta) * np.cos(phi)
    y = r * np.sin(theta) * np.sin(phi)
    z = r * np.cos(theta)
    return x, y, z


def as_vertices(cloud):
    """View a flat (x0, y0, z0, x1, ...) cloud as an (N, 3) array."""
    return np.asarray(cloud).reshape(-1, 3)


def split_trials(trials, workers):
    share, extra = divmod(trials, workers)
    return [share + (1 if i < extra else 0) for i in range(workers)]


def worker_rng(seed, index):
    # seed + worker index keeps each worker reproducible and independent
    if seed is None:
        return np.random.default_rng()
    return np.random.default_rng(int(seed) + index)


def _sample_batch(orbital, n, r_max, acceptance_scale, rng):
    r = rng.uniform(0.0, r_max, n)
    theta = rng.uniform(0.0, np.pi, n)
    phi = rng.uniform(0.0, 2.0 * np.pi, n)
    u = rng.random(n)

    rho = orbital.density(r, theta, phi)

    # Rejection step
    keep = u < rho * acceptance_scale
    x, y, z = to_cartesian(r[keep], theta[keep], phi[keep])
    return np.column_stack((x, y, z)).astype(np.float32).ravel()


def _run_worker(orbital, trials, r_max, acceptance_scale, rng, batch_size, should_stop, pbar):
    chunks = []
    attempted = 0
    stopped = False
    while attempted < trials:
        if should_stop is not None and should_stop():
            stopped = True
            break
        n = min(batch_size, trials - attempted)
        chunks.append(_sample_batch(orbital, n, r_max, acceptance_scale, rng))
        attempted += n
        if pbar is not None:
            # one bar shared by every worker thread
            with pbar.get_lock():
                pbar.update(n)
    return chunks, attempted, stopped


def sample_points(
    orbital,
    trials=DEFAULT_TRIALS,
    r_max=1.0,
    acceptance_scale=DEFAULT_ACCEPTANCE_SCALE,
    *,
    seed=None,
    workers=1,
    batch_size=DEFAULT_BATCH_SIZE,
    should_stop=None,
    progress=False,
):
    """Sample `orbital` by rejection and return a read-only flat float32 cloud.

    The cloud holds three coordinates per accepted point, in acceptance order.
    Worker i draws from its own generator seeded with ``seed + i``; the same
    seed, worker count and batch size reproduce the cloud bit for bit.
    ``should_stop`` is polled before every batch; once it returns True the
    points accepted so far are returned.
    """
    cloud, _ = _sample(orbital, trials, r_max, acceptance_scale, seed, workers, batch_size, should_stop, progress)
    return cloud


def _sample(orbital, trials, r_max, acceptance_scale, seed, workers, batch_size, should_stop, progress):
    orbital = resolve_orbital(orbital)
    validate_parameters(trials, r_max, acceptance_scale, workers, batch_size, seed)

    logger.info(
        f"Sampling {orbital}: trials={trials}, r_max={r_max}, "
        f"acceptance_scale={acceptance_scale}, seed={seed}, workers={workers}"
    )

    shares = split_trials(int(trials), workers)
    rngs = [worker_rng(seed, i) for i in range(workers)]
    pbar = tqdm(total=int(trials), desc=str(orbital), unit="trial", unit_scale=True) if progress else None

    try:
        if workers == 1:
            results = [
                _run_worker(orbital, shares[0], r_max, acceptance_scale, rngs[0], batch_size, should_stop, pbar)
            ]
        else:
            with ThreadPoolExecutor(max_workers=workers) as ex:
                futures = [
                    ex.submit(_run_worker, orbital, share, r_max, acceptance_scale, rng, batch_size, should_stop, pbar)
                    for share, rng in zip(shares, rngs)
                ]
                # worker order, not completion order, so seeded runs stay reproducible
                results = [fut.result() for fut in futures]
    finally:
        if pbar is not None:
            pbar.close()

    chunks = [chunk for worker_chunks, _, _ in results for chunk in worker_chunks]
    cloud = np.concatenate(chunks) if chunks else np.empty(0, dtype=np.float32)
    cloud.setflags(write=False)

    stats = SampleStats(
        orbital=str(orbital),
        trials=int(trials),
        attempted=sum(attempted for _, attempted, _ in results),
        accepted=cloud.size // 3,
        stopped_early=any(stopped for _, _, stopped in results),
    )
    _log_stats(stats)
    return cloud, stats


def _log_stats(stats):
    if stats.stopped_early:
        logger.warning(f"Sampling stopped early after {stats.attempted}/{stats.trials} trials")
    if stats.attempted and stats.accepted == 0:
        logger.warning("No candidates accepted; acceptance_scale is probably too small")
    elif stats.attempted and stats.accepted == stats.attempted:
        logger.warning("Every candidate accepted; acceptance_scale is probably too large")
    logger.info(
        f"Accepted {stats.accepted} of {stats.attempted} candidates "
        f"({stats.acceptance_rate:.4%})"
    )


def run_sampler(config, should_stop=None, progress=False):
    """Run a validated SamplerConfig and return (cloud, SampleStats)."""
    config.validate()
    return _sample(
        config.orbital,
        config.trials,
        config.r_max,
        config.acceptance_scale,
        config.seed,
        config.workers,
        config.batch_size,
        should_stop,
        progress,
    )
