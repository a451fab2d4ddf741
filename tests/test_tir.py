import math

import pytest

from payback_solar.erros import InstabilidadeNumerica
from payback_solar.tir import calcular_tir, verificar_tir


def _investimento_para_taxa(fluxo: float, taxa: float, anos: int) -> float:
    return fluxo * (1 - (1 + taxa) ** -anos) / taxa


class TestCalcularTir:
    @pytest.mark.parametrize("taxa", [0.05, 0.12, 0.25])
    def test_recupera_taxa_conhecida(self, taxa):
        investimento = _investimento_para_taxa(2000, taxa, 25)
        resultado = calcular_tir(investimento, [2000] * 25)
        assert resultado == pytest.approx(taxa, abs=0.01)

    def test_fluxos_nulos_nao_explodem(self):
        taxa = calcular_tir(18000, [0] * 25)
        assert math.isfinite(taxa)


class TestVerificarTir:
    def test_taxa_convergida(self):
        investimento = _investimento_para_taxa(2000, 0.12, 25)
        taxa = calcular_tir(investimento, [2000] * 25)
        assert verificar_tir(taxa, investimento, [2000] * 25) == taxa

    def test_fluxos_nulos_instaveis(self):
        taxa = calcular_tir(18000, [0] * 25)
        with pytest.raises(InstabilidadeNumerica) as exc:
            verificar_tir(taxa, 18000, [0] * 25)
        assert exc.value.taxa == taxa

    def test_fora_da_faixa(self):
        with pytest.raises(InstabilidadeNumerica):
            verificar_tir(15.0, 1000, [100] * 10)

    def test_taxa_nao_finita(self):
        with pytest.raises(InstabilidadeNumerica):
            verificar_tir(float("nan"), 1000, [100] * 10)
