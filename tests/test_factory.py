import pytest
import torch

from KSP import config
from KSP.factory import get_orthogonalizer, get_orthogonalizer_class
from KSP.factorize import SymTridiagonal
from KSP.orth import (ClassicalGramSchmidt, ModifiedGramSchmidt2,
                      ClassicalGramSchmidtIR, ModifiedGramSchmidtIR)


class TestFactory:

    @pytest.mark.parametrize("name, cls", [
        ('ClassicalGramSchmidt', ClassicalGramSchmidt),
        ('cgs', ClassicalGramSchmidt),
        ('MGS2', ModifiedGramSchmidt2),
        ('cgsir', ClassicalGramSchmidtIR),
        ('ModifiedGramSchmidtIR', ModifiedGramSchmidtIR),
    ])
    def test_resolve_class(self, name, cls):
        assert get_orthogonalizer_class(name) is cls

    def test_unknown_name(self):
        with pytest.raises(ValueError, match='Unknown orthogonalizer'):
            get_orthogonalizer_class('Householder')

    def test_default_from_config(self):
        orth = get_orthogonalizer()
        assert type(orth).__name__ == config.ORTH
        assert orth.eta == config.IR_ETA

    def test_eta_forwarded(self):
        assert get_orthogonalizer('mgsir', eta=0.5) == ModifiedGramSchmidtIR(0.5)

    def test_eta_rejected_for_plain_strategies(self):
        with pytest.raises(ValueError):
            get_orthogonalizer('cgs', eta=0.5)


class TestSymTridiagonal:

    def test_entries(self):
        T = SymTridiagonal([1., 2., 3.], [4., 5., 6.])
        assert T.shape == (3, 3)
        assert T[0, 0] == 1.
        assert T[0, 1] == T[1, 0] == 4.
        assert T[2, 1] == 5.
        assert T[0, 2] == 0.
        assert T[-1, -1] == 3.
        assert T.offdiagonal() == [4., 5.]
        with pytest.raises(IndexError):
            T[3, 0]

    def test_to_dense(self):
        T = SymTridiagonal([1., 2.], [3., 9.]).to_dense()
        assert torch.equal(T, torch.tensor([[1., 3.], [3., 2.]], dtype=torch.float64))

    def test_is_a_view(self):
        dv, ev = [1.], [0.5]
        T = SymTridiagonal(dv, ev)
        dv.append(2.)
        ev.append(0.25)
        assert len(T) == 2
        assert T[1, 0] == 0.5

    def test_mismatched_lengths(self):
        with pytest.raises(ValueError):
            SymTridiagonal([1., 2., 3.], [1.])
