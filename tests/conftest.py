"""Shared fixtures: the reference residential customer from the Fio B case studies."""

import pytest

from payback_solar.escalonamento_fio_b import ESCALONAMENTO_PADRAO
from payback_solar.models import ConfigRegimeTarifario, EntradaCalculo


@pytest.fixture
def entrada_residencial() -> EntradaCalculo:
    """400 kWh/mês, 3,2 kWp, R$ 18.000, conectado em 2025."""
    return EntradaCalculo(
        consumo_mensal_kwh=400,
        tarifa_kwh=0.95,
        potencia_instalada_kwp=3.2,
        investimento_total=18000,
        reajuste_anual_tarifa_pct=5,
        degradacao_anual_painel_pct=0.8,
        ano_base=2025,
    )


@pytest.fixture
def config_com_isencao() -> ConfigRegimeTarifario:
    return ConfigRegimeTarifario(
        icms_pct=18,
        percentual_fio_b_atual=45,
        encargos_fixos_mensais=30,
        isencao_scee_disponivel=True,
        percentual_isencao_scee=100,
        uf="MG",
    )


@pytest.fixture
def config_sem_isencao(config_com_isencao) -> ConfigRegimeTarifario:
    return config_com_isencao.model_copy(update={"isencao_scee_disponivel": False})


@pytest.fixture
def escalonamento():
    return ESCALONAMENTO_PADRAO
