"""
Base class for Krylov factorizations.
Provides the common accessors and the symmetric tridiagonal view.
"""
from typing import NamedTuple

import torch

from KSP.orth import OrthonormalBasis


class SymTridiagonal():
    """
    Symmetric tridiagonal matrix viewing a diagonal `dv` (length k) and an
    off-diagonal `ev` (length k-1 or k; only the first k-1 entries are used).
    The view shares the lists it was built from.
    """

    def __init__(self, dv, ev):
        if len(ev) not in (len(dv) - 1, len(dv)) and len(dv) > 0:
            raise ValueError(f'off-diagonal of length {len(ev)} does not fit diagonal of length {len(dv)}')
        self.dv = dv
        self.ev = ev

    def __len__(self):
        return len(self.dv)

    @property
    def shape(self):
        return (len(self.dv), len(self.dv))

    def __getitem__(self, index):
        i, j = index
        k = len(self.dv)
        if not (-k <= i < k and -k <= j < k):
            raise IndexError(f'index {index} out of range for {self.shape}')
        i, j = i % k, j % k
        if i == j:
            return self.dv[i]
        if abs(i - j) == 1:
            return self.ev[min(i, j)]
        return 0.0

    def diagonal(self):
        return list(self.dv)

    def offdiagonal(self):
        return list(self.ev[:len(self.dv) - 1])

    def to_dense(self, dtype=torch.float64, device=None):
        k = len(self.dv)
        T = torch.diag(torch.tensor(self.dv, dtype=dtype, device=device))
        if k > 1:
            e = torch.tensor(self.ev[:k - 1], dtype=dtype, device=device)
            T = T + torch.diag(e, 1) + torch.diag(e, -1)
        return T

    def __repr__(self):
        return f'SymTridiagonal(dv={self.dv}, ev={self.offdiagonal()})'


class KrylovSnapshot(NamedTuple):
    basis: OrthonormalBasis
    rayleigh_quotient: SymTridiagonal
    residual: torch.Tensor


class KrylovFactorization:
    """
    State of a Krylov factorization at dimension k:

        A V_k = V_k H_k + r e_k^T

    Subclasses hold the basis V, the residual r and whatever coefficients
    make up the Rayleigh quotient H_k.
    """

    def __len__(self):
        return self.k

    @property
    def dtype(self):
        raise NotImplementedError

    def basis(self):
        raise NotImplementedError

    def rayleigh_quotient(self):
        raise NotImplementedError

    def normres(self):
        raise NotImplementedError

    def residual(self):
        return self.r

    def snapshot(self):
        # Without kept vectors the snapshot carries the retained window
        return KrylovSnapshot(self.V, self.rayleigh_quotient(), self.residual())
