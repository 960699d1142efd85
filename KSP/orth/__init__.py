from .basis import OrthonormalBasis, apply, inner, norm, real_dtype, eps
from .strategies import (Orthogonalizer, Reorthogonalizer,
                         ClassicalGramSchmidt, ModifiedGramSchmidt,
                         ClassicalGramSchmidt2, ModifiedGramSchmidt2,
                         ClassicalGramSchmidtIR, ModifiedGramSchmidtIR)

__all__ = ['OrthonormalBasis', 'apply', 'inner', 'norm', 'real_dtype', 'eps',
           'Orthogonalizer', 'Reorthogonalizer',
           'ClassicalGramSchmidt', 'ModifiedGramSchmidt',
           'ClassicalGramSchmidt2', 'ModifiedGramSchmidt2',
           'ClassicalGramSchmidtIR', 'ModifiedGramSchmidtIR']
