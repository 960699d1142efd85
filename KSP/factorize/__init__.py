from .base import KrylovFactorization, KrylovSnapshot, SymTridiagonal
from .Lanczos import *

__all__ = ['KrylovFactorization', 'KrylovSnapshot', 'SymTridiagonal',
           'LanczosFactorization', 'LanczosIterator', 'Lanczos', 'lanczos_recurrence']
