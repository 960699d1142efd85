"""
Factory module for resolving orthogonalization strategies from string names.
"""

from KSP import config


def get_orthogonalizer_class(orth_name: str):
    """
    Get the strategy class from a string name.

    Args:
        orth_name: Class name (e.g., 'ModifiedGramSchmidtIR') or short alias
                   (e.g., 'mgsir'), case-insensitive for aliases

    Returns:
        The strategy class object
    """
    from KSP.orth import (ClassicalGramSchmidt, ModifiedGramSchmidt,
                          ClassicalGramSchmidt2, ModifiedGramSchmidt2,
                          ClassicalGramSchmidtIR, ModifiedGramSchmidtIR)

    orth_classes = {
        'ClassicalGramSchmidt': ClassicalGramSchmidt,
        'ModifiedGramSchmidt': ModifiedGramSchmidt,
        'ClassicalGramSchmidt2': ClassicalGramSchmidt2,
        'ModifiedGramSchmidt2': ModifiedGramSchmidt2,
        'ClassicalGramSchmidtIR': ClassicalGramSchmidtIR,
        'ModifiedGramSchmidtIR': ModifiedGramSchmidtIR,
    }
    aliases = {
        'cgs': 'ClassicalGramSchmidt',
        'mgs': 'ModifiedGramSchmidt',
        'cgs2': 'ClassicalGramSchmidt2',
        'mgs2': 'ModifiedGramSchmidt2',
        'cgsir': 'ClassicalGramSchmidtIR',
        'mgsir': 'ModifiedGramSchmidtIR',
    }

    orth_name = aliases.get(orth_name.lower(), orth_name)
    if orth_name not in orth_classes:
        raise ValueError(f"Unknown orthogonalizer: {orth_name}. "
                         f"Available: {list(orth_classes.keys()) + list(aliases.keys())}")

    return orth_classes[orth_name]


def get_orthogonalizer(orth_name: str = None, eta: float = None):
    """
    Instantiate a strategy from a string name.

    Args:
        orth_name: See get_orthogonalizer_class; defaults to config.ORTH
        eta: Refinement threshold, only accepted by the IR strategies

    Returns:
        The strategy instance
    """
    from KSP.orth.strategies import _IterativeRefinement

    orth_cls = get_orthogonalizer_class(orth_name or config.ORTH)
    if issubclass(orth_cls, _IterativeRefinement):
        return orth_cls(eta)
    if eta is not None:
        raise ValueError(f"{orth_cls.__name__} does not take a refinement threshold")
    return orth_cls()
