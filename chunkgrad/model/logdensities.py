# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.


r"""Log-density functions of common distributions.

Every function in this module is built from operations that accept both real and
dual inputs (see :py:mod:`chunkgrad.operations`), so they can be used inside models
differentiated by ChunkGrad. Functions are elementwise: array inputs give array
outputs, which :py:meth:`VariableStore.acclogp() <chunkgrad.model.varinfo.VariableStore.acclogp>`
sums when accumulating.

The following densities are provided:

    - :py:func:`normal_logpdf`: :math:`\mathcal{N}(x \mid \mu, \sigma)`
    - :py:func:`lognormal_logpdf`: :math:`\text{LogNormal}(x \mid \mu, \sigma)`
    - :py:func:`exponential_logpdf`: :math:`\text{Exponential}(x \mid \lambda)`
    - :py:func:`gamma_logpdf`: :math:`\text{Gamma}(x \mid \alpha, \beta)`, rate
      parametrization
    - :py:func:`beta_logpdf`: :math:`\text{Beta}(x \mid \alpha, \beta)`
    - :py:func:`poisson_logpmf`: :math:`\text{Poisson}(k \mid \lambda)`
    - :py:func:`bernoulli_logit_logpmf`: :math:`\text{Bernoulli}(y \mid \sigma(\eta))`

Support constraints are not checked. Values outside the support give NaN or
infinite log-densities, which surface as non-finite gradients.
"""

import numpy as np

from chunkgrad import operations as ops

_HALF_LOG_2PI = 0.5 * np.log(2 * np.pi)


def normal_logpdf(x, mu, sigma):
    r"""Log-density of the normal distribution.

    .. math::

        \log \mathcal{N}(x \mid \mu, \sigma) = -\frac{(x - \mu)^2}{2\sigma^2}
            - \log \sigma - \frac{1}{2}\log 2\pi

    :param x: Value(s)
    :param mu: Location
    :param sigma: Scale. Must be positive.

    :returns: Elementwise log-density
    """
    z = (x - mu) / sigma
    return -0.5 * z * z - ops.log(sigma) - _HALF_LOG_2PI


def lognormal_logpdf(x, mu, sigma):
    r"""Log-density of the log-normal distribution.

    .. math::

        \log \text{LogNormal}(x \mid \mu, \sigma) =
            \log \mathcal{N}(\log x \mid \mu, \sigma) - \log x

    :param x: Value(s). Must be positive.
    :param mu: Location of :math:`\log x`
    :param sigma: Scale of :math:`\log x`. Must be positive.

    :returns: Elementwise log-density
    """
    log_x = ops.log(x)
    return normal_logpdf(log_x, mu, sigma) - log_x


def exponential_logpdf(x, rate):
    r"""Log-density of the exponential distribution.

    .. math::

        \log \text{Exponential}(x \mid \lambda) = \log \lambda - \lambda x

    :param x: Value(s). Must be non-negative.
    :param rate: Rate. Must be positive.

    :returns: Elementwise log-density
    """
    return ops.log(rate) - rate * x


def gamma_logpdf(x, shape, rate):
    r"""Log-density of the gamma distribution in shape-rate parametrization.

    .. math::

        \log \text{Gamma}(x \mid \alpha, \beta) = \alpha \log \beta
            - \log \Gamma(\alpha) + (\alpha - 1) \log x - \beta x

    :param x: Value(s). Must be positive.
    :param shape: Shape :math:`\alpha`. Must be positive.
    :param rate: Rate :math:`\beta`. Must be positive.

    :returns: Elementwise log-density
    """
    return (
        shape * ops.log(rate)
        - ops.gammaln(shape)
        + (shape - 1) * ops.log(x)
        - rate * x
    )


def beta_logpdf(x, alpha, beta):
    r"""Log-density of the beta distribution.

    .. math::

        \log \text{Beta}(x \mid \alpha, \beta) = (\alpha - 1) \log x
            + (\beta - 1) \log (1 - x) - \log B(\alpha, \beta)

    :param x: Value(s). Must be in :math:`(0, 1)`.
    :param alpha: First shape parameter. Must be positive.
    :param beta: Second shape parameter. Must be positive.

    :returns: Elementwise log-density
    """
    log_beta_fn = ops.gammaln(alpha) + ops.gammaln(beta) - ops.gammaln(alpha + beta)
    return (alpha - 1) * ops.log(x) + (beta - 1) * ops.log1p(-x) - log_beta_fn


def poisson_logpmf(k, rate):
    r"""Log-probability mass of the Poisson distribution.

    .. math::

        \log \text{Poisson}(k \mid \lambda) = k \log \lambda - \lambda
            - \log \Gamma(k + 1)

    :param k: Count(s). Treated as data; not differentiated.
    :param rate: Rate. Must be positive.

    :returns: Elementwise log-probability
    """
    return k * ops.log(rate) - rate - ops.gammaln(np.asarray(k, dtype=float) + 1)


def bernoulli_logit_logpmf(y, logit):
    r"""Log-probability mass of the Bernoulli distribution with a logit parameter.

    .. math::

        \log \text{Bernoulli}(y \mid \sigma(\eta)) = y \log \sigma(\eta)
            + (1 - y) \log \sigma(-\eta)

    :param y: Outcome(s), 0 or 1. Treated as data; not differentiated.
    :param logit: Log-odds :math:`\eta`

    :returns: Elementwise log-probability
    """
    return y * ops.log_sigmoid(logit) + (1 - y) * ops.log_sigmoid(-logit)
