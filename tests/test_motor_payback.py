"""End-to-end contract of calcular_payback on the reference customer."""

import pytest

from payback_solar.erros import EntradaInvalida
from payback_solar.motor_payback import MotorPayback, calcular_payback


@pytest.fixture
def resultado(entrada_residencial, config_com_isencao):
    return calcular_payback(entrada_residencial, config_com_isencao)


class TestCenarioComIsencao:
    def test_otimista_economiza_mais(self, resultado):
        assert resultado.otimista.economia_liquida > resultado.conservador.economia_liquida

    def test_otimista_paga_antes(self, resultado):
        assert resultado.otimista.payback_anos <= resultado.conservador.payback_anos

    def test_paybacks_plausiveis(self, resultado):
        assert 3 <= resultado.conservador.payback_anos <= 12
        assert 3 <= resultado.otimista.payback_anos <= 12

    def test_valores_de_referencia(self, resultado):
        assert resultado.conservador.economia_liquida == pytest.approx(2400.19 / 12, abs=0.01)
        assert resultado.otimista.economia_liquida == pytest.approx(3188.16 / 12, abs=0.01)
        assert resultado.conservador.payback_anos == pytest.approx(7.79, abs=0.05)

    def test_monotonicidade_ano_a_ano(self, resultado):
        for c, o in zip(resultado.conservador.serie_anual, resultado.otimista.serie_anual):
            assert c.economia_liquida <= o.economia_liquida

    def test_economia_nunca_negativa(self, resultado):
        for resumo in (resultado.conservador, resultado.otimista):
            assert all(r.economia_liquida >= 0 for r in resumo.serie_anual)

    def test_tir_calculada(self, resultado):
        assert resultado.conservador.tir_confiavel
        assert resultado.otimista.tir_anual_pct > resultado.conservador.tir_anual_pct > 0

    def test_config_usada_ecoada(self, resultado, config_com_isencao):
        assert resultado.config_usada == config_com_isencao

    def test_escalonamento_padrao_sinalizado(self, resultado):
        assert any("Escalonamento do Fio B não configurado" in a for a in resultado.alertas)


class TestSemAnoBase:
    def test_primeiro_ano_usa_fio_b_configurado(self, entrada_residencial, config_com_isencao):
        entrada = entrada_residencial.model_copy(update={"ano_base": None})
        resultado = calcular_payback(entrada, config_com_isencao)
        assert resultado.fio_b_impacto_anual[0].percentual == 45
        assert resultado.config_usada.percentual_fio_b_atual == 45
        assert resultado.fio_b_impacto_anual[1].percentual == 60

    def test_independe_do_relogio(self, entrada_residencial, config_com_isencao, resultado):
        entrada = entrada_residencial.model_copy(update={"ano_base": None})
        sem_ano_base = calcular_payback(entrada, config_com_isencao)
        assert sem_ano_base.conservador == resultado.conservador
        assert sem_ano_base.otimista == resultado.otimista


class TestCenarioSemIsencao:
    def test_cenarios_identicos(self, entrada_residencial, config_sem_isencao):
        resultado = calcular_payback(entrada_residencial, config_sem_isencao)
        conservador = resultado.conservador.model_dump(exclude={"rotulo"})
        otimista = resultado.otimista.model_dump(exclude={"rotulo"})
        assert conservador == otimista

    def test_alerta_de_colapso(self, entrada_residencial, config_sem_isencao):
        resultado = calcular_payback(entrada_residencial, config_sem_isencao)
        assert any("cenário otimista igual ao conservador" in a for a in resultado.alertas)


class TestPotenciaDegenerada:
    @pytest.fixture
    def resultado(self, entrada_residencial, config_com_isencao):
        entrada = entrada_residencial.model_copy(update={"potencia_instalada_kwp": 0.0001})
        return calcular_payback(entrada, config_com_isencao)

    def test_kwh_praticamente_nulo(self, resultado):
        assert all(r.kwh_compensado == pytest.approx(0, abs=1) for r in resultado.conservador.serie_anual)

    def test_payback_nao_atingido(self, resultado):
        assert resultado.conservador.payback_anos == 0
        assert resultado.otimista.payback_anos == 0
        assert not resultado.conservador.payback_atingido

    def test_alertas_presentes(self, resultado):
        assert any("subdimensionada" in a for a in resultado.alertas)
        assert any("payback não atingido" in a for a in resultado.alertas)

    def test_tir_nao_confiavel(self, resultado):
        assert not resultado.conservador.tir_confiavel
        assert any("TIR não convergiu" in a for a in resultado.alertas)


class TestEntrada:
    def test_aceita_dicionarios_camel_case(self):
        resultado = calcular_payback(
            {
                "consumoMensalKwh": 400,
                "tarifaKwh": 0.95,
                "potenciaInstaladaKwp": 3.2,
                "investimentoTotal": 18000,
                "anoBase": 2025,
            },
            {"icmsPct": 18, "percentualFioBAtual": 45, "encargosFixosMensais": 30},
        )
        assert resultado.conservador.payback_atingido

    @pytest.mark.parametrize("campo, valor", [
        ("consumo_mensal_kwh", 0),
        ("tarifa_kwh", -1),
        ("investimento_total", 0),
        ("horizonte_anos", 0),
    ])
    def test_entrada_invalida(self, entrada_residencial, config_com_isencao, campo, valor):
        dados = {**entrada_residencial.model_dump(), campo: valor}
        with pytest.raises(EntradaInvalida):
            calcular_payback(dados, config_com_isencao)

    def test_config_invalida(self, entrada_residencial):
        with pytest.raises(EntradaInvalida, match="<= 100"):
            MotorPayback(entrada_residencial, {"icms_pct": 150}).calcular()


def test_serializacao_camel_case(resultado):
    dados = resultado.model_dump(by_alias=True)
    assert {"conservador", "otimista", "configUsada", "alertas", "fioBImpactoAnual"} <= dados.keys()
    assert "economiaLiquida" in dados["conservador"]
    assert "paybackAnos" in dados["otimista"]
    assert "economiaLiquidaOtimista" in dados["fioBImpactoAnual"][0]
