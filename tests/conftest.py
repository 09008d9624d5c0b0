"""Pytest configuration and fixtures for chunkgrad tests."""

import numpy as np
import pytest

from chunkgrad.model import Model, VariableStore
from chunkgrad.model import logdensities as ld


@pytest.fixture
def xy_store():
    """Two scalar variables: x = 3.0, y = 2.0."""
    vi = VariableStore()
    vi.push("x", 3.0)
    vi.push("y", 2.0)
    return vi


@pytest.fixture
def xy_model():
    """Model with log-density -(x^2 + y^2)."""

    def quadratic(vi, sampler):
        x = vi["x"][0]
        y = vi["y"][0]
        vi.acclogp(-(x**2 + y**2))

    return Model(quadratic)


@pytest.fixture
def vector_store():
    """Vector-valued variables of mixed dimension.

    a: 3 scalars, b: 1 scalar, c: 4 scalars, d: 2 scalars
    """
    vi = VariableStore()
    vi.push("a", [0.5, -1.0, 2.0])
    vi.push("b", 1.5)
    vi.push("c", np.linspace(-1.0, 1.0, 4))
    vi.push("d", [3.0, -0.25])
    return vi


@pytest.fixture
def targets():
    """Centers of the sum-of-squared-deviations model for ``vector_store``."""
    return {
        "a": np.array([1.0, 0.0, -1.0]),
        "b": np.array([0.5]),
        "c": np.array([0.1, 0.2, 0.3, 0.4]),
        "d": np.array([-2.0, 2.0]),
    }


@pytest.fixture
def squared_deviation_model(targets):
    """Model with log-density -sum over variables of ||v - target||^2."""

    def squared_deviations(vi, sampler):
        for key, target in targets.items():
            vi.acclogp(-((vi[key] - target) ** 2))

    return Model(squared_deviations)


@pytest.fixture
def grouped_store():
    """Variables split among two groups plus two global variables.

    Group 1: "mu", "sigma". Group 2: "theta[1]", "theta[2]".
    Global: "alpha", "beta".
    """
    vi = VariableStore()
    vi.push("alpha", 0.3)
    vi.push("mu", [0.1, 0.2], group_id=1)
    vi.push("theta[1]", 1.0, group_id=2)
    vi.push("beta", [1.0, 2.0, 3.0])
    vi.push("sigma", 1.2, group_id=1)
    vi.push("theta[2]", -1.0, group_id=2)
    return vi


@pytest.fixture
def hierarchical_data():
    """Observations for the hierarchical model."""
    return {
        "y": np.array([0.4, -0.3, 1.1]),
        "counts": np.array([2, 0, 3]),
        "outcomes": np.array([1, 0, 1]),
    }


@pytest.fixture
def hierarchical_store():
    """Latent variables of the hierarchical model."""
    vi = VariableStore()
    vi.push("mu", 0.2)
    vi.push("tau", 1.3)
    vi.push("theta", [0.5, -0.1, 0.8])
    vi.push("p", 0.35)
    return vi


@pytest.fixture
def hierarchical_model(hierarchical_data):
    """Hierarchical model exercising every log-density in the package."""

    def hierarchical(vi, sampler):
        mu = vi["mu"][0]
        tau = vi["tau"][0]
        theta = vi["theta"]
        p = vi["p"][0]

        # Priors
        vi.acclogp(ld.normal_logpdf(mu, 0.0, 1.0))
        vi.acclogp(ld.gamma_logpdf(tau, 2.0, 1.0))
        vi.acclogp(ld.normal_logpdf(theta, mu, tau))
        vi.acclogp(ld.beta_logpdf(p, 2.0, 3.0))

        # Likelihood
        vi.acclogp(ld.lognormal_logpdf(tau, 0.0, 0.5))
        vi.acclogp(ld.exponential_logpdf(tau, 1.5))
        vi.acclogp(ld.normal_logpdf(hierarchical_data["y"], theta, 1.0))
        vi.acclogp(ld.poisson_logpmf(hierarchical_data["counts"], tau))
        vi.acclogp(ld.bernoulli_logit_logpmf(hierarchical_data["outcomes"], theta))
        vi.acclogp(ld.bernoulli_logit_logpmf(1, p * 4.0 - 2.0))

    return Model(hierarchical)
