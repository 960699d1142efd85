from .errors import (LanczosError, ConfigurationError, HermiticityError,
                     InvariantSubspaceError, RetentionError)
from .orth import *
from .factorize import *
from .factory import get_orthogonalizer

__version__ = '0.1.0'
