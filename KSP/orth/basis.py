"""
Vector primitives and the ordered Krylov basis container.
Vectors are torch tensors of any shape; the inner product conjugates its
first argument.
"""
from collections import deque

import torch


def apply(operator, v):
    # Callables (closures, preconditioners) first, then matrices
    if callable(operator):
        w = operator(v)
    else:
        # matmul does not promote, so widen v to the operator dtype first
        w = operator @ v.to(torch.promote_types(operator.dtype, v.dtype))
    # The result is modified in place by the recurrence
    if w is v or w.data_ptr() == v.data_ptr():
        w = w.clone()
    return w


def inner(v, w):
    return torch.vdot(v.reshape(-1), w.reshape(-1)).item()


def norm(v):
    return torch.linalg.vector_norm(v).item()


def real_dtype(dtype):
    if dtype.is_complex:
        return torch.empty((), dtype=dtype).real.dtype
    return dtype


def eps(dtype):
    return torch.finfo(real_dtype(dtype)).eps


#-----------------------------------------------------------------------------
# Ordered basis. With maxlen=None every vector is kept; with a finite
# maxlen appending drops the oldest vector (sliding window).
class OrthonormalBasis():

    def __init__(self, vectors=(), maxlen=None):
        self._vectors = deque(vectors, maxlen)

    @property
    def maxlen(self):
        return self._vectors.maxlen

    def append(self, v):
        self._vectors.append(v)
        return self

    def shift(self):
        """Remove and return the oldest vector."""
        return self._vectors.popleft()

    def pop(self):
        """Remove and return the newest vector."""
        return self._vectors.pop()

    def __getitem__(self, i):
        return self._vectors[i]

    def __len__(self):
        return len(self._vectors)

    def __iter__(self):
        return iter(self._vectors)

    def __repr__(self):
        return f'OrthonormalBasis(len={len(self)}, maxlen={self.maxlen})'

    def to_tensor(self):
        """Stack the vectors as the columns of a matrix."""
        return torch.stack([v.reshape(-1) for v in self._vectors], dim=1)

    def gram(self):
        """Matrix of pairwise inner products; the identity for an exact basis."""
        Q = self.to_tensor()
        return Q.conj().T @ Q

    def project(self, x):
        """Coefficients of x along each basis vector."""
        return [inner(q, x) for q in self._vectors]
