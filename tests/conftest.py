import pytest
import torch

from KSP.orth import (ClassicalGramSchmidt, ModifiedGramSchmidt,
                      ClassicalGramSchmidt2, ModifiedGramSchmidt2,
                      ClassicalGramSchmidtIR, ModifiedGramSchmidtIR)
from KSP.problems import symmetric_matrix_from_eigenvalues

STRATEGIES = [
    ClassicalGramSchmidt(),
    ModifiedGramSchmidt(),
    ClassicalGramSchmidt2(),
    ModifiedGramSchmidt2(),
    ClassicalGramSchmidtIR(),
    ModifiedGramSchmidtIR(),
]

REORTHOGONALIZERS = STRATEGIES[2:]


def strategy_id(orth):
    return repr(orth)


@pytest.fixture
def tridiagonal_4x4():
    """Integer tridiagonal matrix: Lanczos from e1 reproduces it exactly."""
    return torch.tensor([[2., 1., 0., 0.],
                         [1., 2., 1., 0.],
                         [0., 1., 2., 1.],
                         [0., 0., 1., 2.]], dtype=torch.float64)


@pytest.fixture
def e1():
    return torch.tensor([1., 0., 0., 0.], dtype=torch.float64)


@pytest.fixture
def spd_matrix():
    """Well-conditioned 40 x 40 symmetric matrix with eigenvalues in [1, 10]."""
    return symmetric_matrix_from_eigenvalues(torch.linspace(1., 10., 40), seed=1)


@pytest.fixture
def ones40():
    return torch.ones(40, dtype=torch.float64)
