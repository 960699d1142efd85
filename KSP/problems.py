"""
Model operators and vectors for tests and examples.
"""
import torch


def gen_1d_laplacian(n, dtype=torch.float64):
    """Sparse n x n tridiagonal matrix with 2 on the diagonal and -1 beside it."""
    i = torch.arange(n)
    rows = torch.cat([i, i[:-1], i[1:]])
    cols = torch.cat([i, i[1:], i[:-1]])
    vals = torch.cat([2 * torch.ones(n, dtype=dtype),
                      -torch.ones(n - 1, dtype=dtype),
                      -torch.ones(n - 1, dtype=dtype)])
    return torch.sparse_coo_tensor(torch.stack([rows, cols]), vals, (n, n)).coalesce()


def gen_x_randn(n, dtype=torch.float64):
    return torch.randn(n, dtype=dtype)


def symmetric_matrix_from_eigenvalues(eigvals, seed=0):
    """Dense matrix Q diag(eigvals) Q^T with a random orthogonal Q."""
    eigvals = torch.as_tensor(eigvals, dtype=torch.float64)
    n = len(eigvals)
    generator = torch.Generator().manual_seed(seed)
    X = torch.randn(n, n, dtype=torch.float64, generator=generator)
    Q, _ = torch.linalg.qr(X)
    return Q @ torch.diag(eigvals) @ Q.T
