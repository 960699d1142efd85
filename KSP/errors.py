"""
Exceptions raised by the Lanczos factorization.
"""


class LanczosError(Exception):
    pass


class ConfigurationError(LanczosError, ValueError):
    """Invalid combination of iterator or strategy settings."""


class HermiticityError(LanczosError, ArithmeticError):
    """The operator does not appear to be Hermitian."""


class RetentionError(LanczosError, RuntimeError):
    """The operation needs Krylov vectors that were not kept."""


class InvariantSubspaceError(LanczosError, ValueError):
    """The residual is zero: the Krylov subspace is invariant and cannot grow."""
