import copy
import math

import torch
from tqdm import tqdm
from loguru import logger

from KSP import config
from KSP.errors import (ConfigurationError, HermiticityError, InvariantSubspaceError,
                        RetentionError)
from KSP.orth import (OrthonormalBasis, apply, norm, real_dtype, eps,
                      Reorthogonalizer,
                      ClassicalGramSchmidt, ModifiedGramSchmidt,
                      ClassicalGramSchmidt2, ModifiedGramSchmidt2,
                      ClassicalGramSchmidtIR, ModifiedGramSchmidtIR)
from .base import KrylovFactorization, KrylovSnapshot, SymTridiagonal

__all__ = ['LanczosFactorization', 'LanczosIterator', 'Lanczos', 'lanczos_recurrence']


#-----------------------------------------------------------------------------
# Lanczos factorization of a Hermitian operator A:
#
#     A V_k = V_k T_k + r e_k^T
#
# with V_k orthonormal and T_k symmetric tridiagonal (alphas on the
# diagonal, betas off the diagonal). betas[-1] is the norm of r.
class LanczosFactorization(KrylovFactorization):

    def __init__(self, k, V, alphas, betas, r):
        self.k = k
        self.V = V
        self.alphas = alphas
        self.betas = betas
        self.r = r

    @property
    def dtype(self):
        return real_dtype(self.r.dtype)

    def basis(self):
        if self.V.maxlen is not None or len(self.V) != self.k:
            raise RetentionError('Not keeping vectors during Lanczos factorization')
        return self.V

    def rayleigh_quotient(self):
        return SymTridiagonal(self.alphas, self.betas)

    def normres(self):
        return self.betas[self.k - 1]

    def shrink_(self, k):
        """Truncate in place to dimension k, restoring v_{k+1} as the residual."""
        if self.V.maxlen is not None or len(self) != len(self.V):
            raise RetentionError('we cannot shrink LanczosFactorization without keeping Lanczos vectors')
        if k < 1:
            raise ValueError(f'cannot shrink to dimension {k}')
        if len(self) <= k:
            return self
        V = self.V
        while len(V) > k + 1:
            V.pop()
        r = V.pop()
        del self.alphas[k:]
        del self.betas[k:]
        self.k = k
        self.r = r.mul_(self.normres())
        logger.debug(f'Lanczos shrink: k={k}, normres={self.normres():.3e}')
        return self

    def __repr__(self):
        return f'LanczosFactorization(k={self.k}, normres={self.normres():.3e}, dtype={self.dtype})'


def _check_hermitian(alpha, beta, beta_old, dtype):
    n = math.hypot(abs(alpha), beta, beta_old)
    e = eps(dtype)
    if abs(alpha.imag) > math.sqrt(max(e * n, e)):
        raise HermiticityError(f'operator does not appear to be hermitian: {alpha.imag} vs {n}')


def _promote(v0):
    if v0.is_floating_point() or v0.is_complex():
        return v0
    return v0.to(torch.get_default_dtype())


#-----------------------------------------------------------------------------
# Three-term recurrence. Hermiticity of A means only v_{k-1} and v_k have
# to be projected out of A v_k; the reorthogonalizing variants additionally
# sweep over the whole basis V.
_CGS = ClassicalGramSchmidt()
_MGS = ModifiedGramSchmidt()


def _recurrence_gs(operator, V, beta, orth):
    v = V[-1]
    w = apply(operator, v)
    w.add_(V[-2], alpha=-beta)

    w, alpha = orth.orthogonalize(w, v)
    beta = norm(w)
    return w, alpha, beta


def _recurrence_cgs2(operator, V, beta, orth):
    v = V[-1]
    w = apply(operator, v)
    w.add_(V[-2], alpha=-beta)

    w, alpha = _CGS.orthogonalize(w, v)
    w, s = _CGS.orthogonalize(w, V)
    alpha += s[-1]
    beta = norm(w)
    return w, alpha, beta


def _recurrence_mgs2(operator, V, beta, orth):
    v = V[-1]
    w = apply(operator, v)
    w.add_(V[-2], alpha=-beta)

    w, alpha = _MGS.orthogonalize(w, v)
    s = alpha
    for q in V:
        w, s = _MGS.orthogonalize(w, q)
    alpha += s
    beta = norm(w)
    return w, alpha, beta


def _recurrence_cgsir(operator, V, beta, orth):
    v = V[-1]
    w = apply(operator, v)
    w.add_(V[-2], alpha=-beta)

    w, alpha = _CGS.orthogonalize(w, v)
    ab2 = abs(alpha)**2 + beta**2
    beta = norm(w)
    nold = math.sqrt(beta**2 + ab2)
    while beta < orth.eta * nold:
        nold = beta
        w, s = _CGS.orthogonalize(w, V)
        alpha += s[-1]
        beta = norm(w)
    return w, alpha, beta


def _recurrence_mgsir(operator, V, beta, orth):
    v = V[-1]
    w = apply(operator, v)
    w.add_(V[-2], alpha=-beta)

    w, alpha = _MGS.orthogonalize(w, v)
    ab2 = abs(alpha)**2 + beta**2
    beta = norm(w)
    nold = math.sqrt(beta**2 + ab2)
    while beta < orth.eta * nold:
        nold = beta
        s = 0.0
        for q in V:
            w, s = _MGS.orthogonalize(w, q)
        alpha += s
        beta = norm(w)
    return w, alpha, beta


_RECURRENCES = {
    ClassicalGramSchmidt: _recurrence_gs,
    ModifiedGramSchmidt: _recurrence_gs,
    ClassicalGramSchmidt2: _recurrence_cgs2,
    ModifiedGramSchmidt2: _recurrence_mgs2,
    ClassicalGramSchmidtIR: _recurrence_cgsir,
    ModifiedGramSchmidtIR: _recurrence_mgsir,
}


def lanczos_recurrence(operator, V, beta, orth):
    """
    One step of the Lanczos recurrence: given the basis V (ending in v_k,
    preceded by v_{k-1}) and beta = ||r_{k-1}||, return (r_k, alpha_k, beta_k).
    """
    for cls in type(orth).__mro__:
        if cls in _RECURRENCES:
            return _RECURRENCES[cls](operator, V, beta, orth)
    raise ConfigurationError(f'No Lanczos recurrence for orthogonalizer {orth!r}')


#-----------------------------------------------------------------------------
# Lazy Lanczos iteration. Iterating yields one snapshot
# (basis, rayleigh_quotient, residual) per Krylov dimension k = 1, 2, ...
# and stops once the residual norm drops below machine precision.
class LanczosIterator():

    def __init__(self, operator, v0, orth=None, keep_vectors=None):
        if orth is None:
            from KSP.factory import get_orthogonalizer
            orth = get_orthogonalizer()
        if keep_vectors is None:
            keep_vectors = config.KEEP_VECTORS
        if not keep_vectors and isinstance(orth, Reorthogonalizer):
            raise ConfigurationError('Cannot use reorthogonalization without keeping all Krylov vectors')
        self._operator = operator
        self._v0 = v0
        self._orth = orth
        self._keep_vectors = keep_vectors

    @property
    def operator(self):
        return self._operator

    @property
    def v0(self):
        return self._v0

    @property
    def orth(self):
        return self._orth

    @property
    def keep_vectors(self):
        return self._keep_vectors

    def __iter__(self):
        return (state.snapshot() for state in self.factorizations())

    def factorizations(self):
        """Yield an independent LanczosFactorization for every dimension."""
        state = self.initialize()
        yield state
        tol = eps(state.r.dtype)
        while state.normres() >= tol:
            state = self.expand(state)
            yield state

    def initialize(self):
        v0 = _promote(self.v0)
        beta0 = norm(v0)
        if beta0 == 0:
            raise ValueError('starting vector must be nonzero')
        v = v0 / beta0
        w = apply(self.operator, v)  # might change dtype
        v = v.to(w.dtype)
        r, alpha = self.orth.orthogonalize(w, v)
        beta = norm(r)
        _check_hermitian(alpha, beta, 0.0, r.dtype)

        V = OrthonormalBasis([v], maxlen=None if self.keep_vectors else 2)
        logger.debug(f'Lanczos initialize: alpha={alpha.real:.6e}, beta={beta:.3e}')
        return LanczosFactorization(1, V, [alpha.real], [beta], r)

    def initialize_(self, state):
        """Reset state in place to dimension 1, reusing its first vector."""
        v0 = _promote(self.v0)
        beta0 = norm(v0)
        if beta0 == 0:
            raise ValueError('starting vector must be nonzero')
        V = state.V
        while len(V) > 1:
            V.pop()
        state.alphas.clear()
        state.betas.clear()

        v = V[0].copy_(v0).div_(beta0)
        w = apply(self.operator, v)
        r, alpha = self.orth.orthogonalize(w, v)
        beta = norm(r)
        _check_hermitian(alpha, beta, 0.0, r.dtype)

        state.k = 1
        state.alphas.append(alpha.real)
        state.betas.append(beta)
        state.r = r
        logger.debug(f'Lanczos initialize_: alpha={alpha.real:.6e}, beta={beta:.3e}')
        return state

    def expand_(self, state):
        """Grow state in place from dimension k to k+1."""
        beta_old = state.normres()
        if beta_old == 0:
            raise InvariantSubspaceError(f'residual vanished at dimension {len(state)}, nothing to expand')
        V = state.V
        # A bounded window drops the oldest vector here
        V.append(state.r.mul_(1 / beta_old))
        r, alpha, beta = lanczos_recurrence(self.operator, V, beta_old, self.orth)
        try:
            _check_hermitian(alpha, beta, beta_old, r.dtype)
        except HermiticityError:
            # Leave state at dimension k; a window keeps only v_k
            state.r = V.pop().mul_(beta_old)
            raise

        state.alphas.append(alpha.real)
        state.betas.append(beta)
        state.k += 1
        state.r = r
        logger.debug(f'Lanczos expand: k={state.k}, alpha={alpha.real:.6e}, beta={beta:.3e}')
        return state

    def expand(self, state):
        """Return the factorization of dimension k+1, leaving state untouched."""
        return self.expand_(copy.deepcopy(state))

    def __repr__(self):
        return f'LanczosIterator(orth={self.orth!r}, keep_vectors={self.keep_vectors})'


#-----------------------------------------------------------------------------
# Lanczos process (at most m steps) returning dense matrices.
class Lanczos():

    def build(self, A, v0=None, m=None, orth=None, progress_bar=False):
        if m is None:
            m = config.LANCZOS_M
        if v0 is None:
            if callable(A):
                raise ValueError('a starting vector is required for a callable operator')
            n = A.shape[0]
            v0 = torch.normal(0, 1, size=(n,), dtype=A.dtype).to(A.device)

        iterator = LanczosIterator(A, v0, orth)
        state = iterator.initialize()
        tol = eps(state.r.dtype)

        with tqdm(total=m, desc='Lanczos', disable=not progress_bar) as pbar:
            pbar.update()
            while len(state) < m and state.normres() >= tol:
                iterator.expand_(state)
                pbar.update()

        k = len(state)
        beta = state.normres()
        Vk = state.basis().to_tensor()
        q = state.r.reshape(-1)
        q = q / beta if beta > 0 else torch.zeros_like(q)

        # V stores the orthonormal basis plus the normalized residual
        Vm1 = torch.cat([Vk, q.view(-1, 1)], dim=1)
        # Tridiagonal block of T on top, beta_k in the last row
        T = torch.zeros(k + 1, k, dtype=Vm1.dtype, device=Vm1.device)
        T[:k, :k] = state.rayleigh_quotient().to_dense(dtype=Vm1.dtype, device=Vm1.device)
        T[k, k - 1] = beta

        barTm = T
        return Vm1, barTm
