'''
Pytest configuration and fixtures for the ARIMA Kit test suite.

This module provides the data used across the test suite: a seeded random
number generator, reference series with known estimation results, and
simulated AR, MA and ARMA processes. Configuration is reset after every test
so that tests changing it do not leak into each other.
'''

from typing import Dict

import numpy as np
import pytest
from hypothesis import strategies as st
from statsmodels.tsa.arima_process import ArmaProcess

from arimakit.core.config import reset_config


# ---- Configuration ----

@pytest.fixture(autouse=True)
def _restore_config():
    """Reset the global configuration after each test."""
    yield
    reset_config()


# ---- Basic Data Generation Fixtures ----

@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def sample_size() -> int:
    """Default sample size for simulated series."""
    return 2000


def simulate_arma(rng: np.random.Generator,
                  n: int,
                  ar: tuple = (),
                  ma: tuple = (),
                  mean: float = 0.0) -> np.ndarray:
    """Simulate an ARMA process with unit innovation variance."""
    process = ArmaProcess(np.r_[1.0, -np.asarray(ar, dtype=float)],
                          np.r_[1.0, np.asarray(ma, dtype=float)])
    sample = process.generate_sample(nsample=n, distrvs=rng.standard_normal, burnin=500)
    return mean + sample


@pytest.fixture
def ar1_process(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """AR(1) process with phi = 0.7."""
    return simulate_arma(rng, sample_size, ar=(0.7,))


@pytest.fixture
def ar2_process(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """AR(2) process with phi = [0.6, -0.3] around a mean of 5."""
    return simulate_arma(rng, sample_size, ar=(0.6, -0.3), mean=5.0)


@pytest.fixture
def ma1_process(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """MA(1) process with theta = 0.5."""
    return simulate_arma(rng, sample_size, ma=(0.5,))


@pytest.fixture
def arma11_process(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """ARMA(1,1) process with phi = 0.5 and theta = 0.4."""
    return simulate_arma(rng, sample_size, ar=(0.5,), ma=(0.4,))


@pytest.fixture
def white_noise(rng: np.random.Generator, sample_size: int) -> np.ndarray:
    """Standard normal white noise."""
    return rng.standard_normal(sample_size)


# ---- Reference Series ----

@pytest.fixture
def ar3_series() -> np.ndarray:
    """Twenty observations of an AR(3) process with reference CSS results."""
    return np.array([
        149.8228533548, 86.8388399871, 42.3116899484, 76.6796578536,
        60.3665347774, 66.7733563129, -5.1144504108, 14.0294086329,
        76.2517878809, 121.2898170491, 74.65663878, 69.9331198692,
        46.7476543397, 26.2225173663, -32.0638217183, 2.8335240789,
        31.5182582874, 76.4827451823, 36.6122657518, -33.430444607,
    ])


@pytest.fixture
def ar2_sample() -> np.ndarray:
    """Twelve observations of an AR(2) process with reference autocovariances."""
    return np.array([
        22.71659, 23.24932, 24.86742, 25.19197, 22.92390, 24.80207,
        25.71119, 25.90546, 21.85956, 24.35609, 30.51819, 25.80506,
    ])


@pytest.fixture
def short_series() -> np.ndarray:
    """The four-point ramp used in the worked examples."""
    return np.array([1.0, 1.2, 1.4, 1.6])


@pytest.fixture
def tent_series() -> np.ndarray:
    """Seven-point rise and fall used for the MA(1) worked example."""
    return np.array([1.0, 1.2, 1.4, 1.6, 1.4, 1.2, 1.0])


@pytest.fixture
def arma_params() -> Dict[str, np.ndarray]:
    """Coefficients of the simulated ARMA(1,1) process."""
    return {"ar": np.array([0.5]), "ma": np.array([0.4])}


# ---- Hypothesis Strategies ----

def series_strategy(min_size: int = 5, max_size: int = 60) -> st.SearchStrategy:
    """Non-degenerate finite series of moderate magnitude."""
    return st.lists(
        st.floats(min_value=-100, max_value=100, allow_nan=False, allow_infinity=False),
        min_size=min_size,
        max_size=max_size
    ).map(np.array).filter(lambda x: np.std(x) > 1e-3)
