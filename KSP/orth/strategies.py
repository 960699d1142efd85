"""
Orthogonalization strategies.

Every strategy projects a vector w onto the orthogonal complement of a
single reference vector or of a whole basis:

    w, c  = orth.orthogonalize(w, v)   # c is a scalar
    w, cs = orth.orthogonalize(w, V)   # cs is a list, one entry per vector

w is updated in place and returned; the reference vectors are never
modified. The strategies differ only in numerical stability and cost:

    ClassicalGramSchmidt     all coefficients from the incoming w
    ModifiedGramSchmidt      each coefficient from the already updated w
    *2                       the same pass applied twice
    *IR                      passes repeated while the norm keeps dropping
                             below eta times its previous value

The 2- and IR-variants are Reorthogonalizers: inside the Lanczos recurrence
they need every Krylov vector, not just the last two.
"""
import torch
from loguru import logger

from KSP import config
from KSP.errors import ConfigurationError
from .basis import inner, norm


def _cgs_pass(w, vectors):
    coeffs = [inner(q, w) for q in vectors]
    for c, q in zip(coeffs, vectors):
        w.add_(q, alpha=-c)
    return w, coeffs


def _mgs_pass(w, vectors):
    coeffs = []
    for q in vectors:
        c = inner(q, w)
        w.add_(q, alpha=-c)
        coeffs.append(c)
    return w, coeffs


def _accumulate(coeffs, extra):
    return [a + b for a, b in zip(coeffs, extra)]


class Orthogonalizer():

    def orthogonalize(self, w, reference):
        if isinstance(reference, torch.Tensor):
            w, coeffs = self._orthogonalize(w, [reference])
            return w, coeffs[0]
        return self._orthogonalize(w, list(reference))

    def _orthogonalize(self, w, vectors):
        raise NotImplementedError

    def __repr__(self):
        return f'{type(self).__name__}()'

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self):
        return hash((type(self), tuple(sorted(vars(self).items()))))


class Reorthogonalizer(Orthogonalizer):
    """Strategies that need access to the full historical basis."""


class ClassicalGramSchmidt(Orthogonalizer):

    def _orthogonalize(self, w, vectors):
        return _cgs_pass(w, vectors)


class ModifiedGramSchmidt(Orthogonalizer):

    def _orthogonalize(self, w, vectors):
        return _mgs_pass(w, vectors)


class ClassicalGramSchmidt2(Reorthogonalizer):

    def _orthogonalize(self, w, vectors):
        w, coeffs = _cgs_pass(w, vectors)
        w, extra = _cgs_pass(w, vectors)
        return w, _accumulate(coeffs, extra)


class ModifiedGramSchmidt2(Reorthogonalizer):

    def _orthogonalize(self, w, vectors):
        w, coeffs = _mgs_pass(w, vectors)
        w, extra = _mgs_pass(w, vectors)
        return w, _accumulate(coeffs, extra)


class _IterativeRefinement(Reorthogonalizer):
    _pass = None

    def __init__(self, eta=None):
        if eta is None:
            eta = config.IR_ETA
        if not 0 < eta < 1:
            raise ConfigurationError(f'eta must lie in (0, 1), got {eta}')
        self.eta = eta

    def __repr__(self):
        return f'{type(self).__name__}(eta={self.eta})'

    def _orthogonalize(self, w, vectors):
        nold = norm(w)
        w, coeffs = type(self)._pass(w, vectors)
        nnew = norm(w)
        passes = 1
        while nnew < self.eta * nold:
            nold = nnew
            w, extra = type(self)._pass(w, vectors)
            coeffs = _accumulate(coeffs, extra)
            nnew = norm(w)
            passes += 1
        if passes > 2:
            logger.debug(f'{type(self).__name__}: {passes} passes, norm {nold:.3e} -> {nnew:.3e}')
        return w, coeffs


class ClassicalGramSchmidtIR(_IterativeRefinement):
    _pass = _cgs_pass


class ModifiedGramSchmidtIR(_IterativeRefinement):
    _pass = _mgs_pass
