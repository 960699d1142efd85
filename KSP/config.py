"""
Lanczos factorization defaults.
"""
import math

# Default orthogonalization strategy (class name or alias, see KSP.factory)
ORTH = 'ModifiedGramSchmidtIR'

# Refinement threshold of the iteratively refined strategies, 0 < eta < 1
IR_ETA = 1 / math.sqrt(2)

# Keep every Krylov vector (required by reorthogonalizing strategies)
KEEP_VECTORS = True

# Krylov subspace size for Lanczos.build
LANCZOS_M = 80

# Examples
SEED = 0
