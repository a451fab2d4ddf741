from payback_solar.alertas import gerar_alertas
from payback_solar.models import EscalonamentoFioB, RegimeCompensacao
from payback_solar.projecao import projetar


def _alertas(entrada, config, escalonamento=None, **kwargs):
    projecao = projetar(entrada, config, escalonamento)
    return gerar_alertas(entrada, config, projecao.conservador, projecao.otimista,
                         escalonamento=escalonamento, **kwargs)


def _contem(alertas, trecho):
    return any(trecho in a for a in alertas)


class TestAlertasDados:
    def test_valores_padrao_sinalizados(self, entrada_residencial, config_com_isencao):
        alertas = _alertas(entrada_residencial, config_com_isencao, escalonamento_padrao=True)
        assert _contem(alertas, "Escalonamento do Fio B não configurado")
        assert _contem(alertas, "Recomendado configurar tarifa Fio B")
        assert _contem(alertas, "Fator de geração não informado")

    def test_dados_completos_sem_alerta_de_lacuna(self, entrada_residencial, config_com_isencao,
                                                   escalonamento):
        entrada = entrada_residencial.model_copy(update={"fator_geracao_kwh_kwp": 120})
        config = config_com_isencao.model_copy(update={"tarifa_fio_b_kwh": 0.40})
        assert _alertas(entrada, config, escalonamento) == []

    def test_uf_sem_configuracao(self, entrada_residencial, config_sem_isencao):
        config = config_sem_isencao.model_copy(update={"origem_tributaria": "padrao", "uf": "XX"})
        alertas = _alertas(entrada_residencial, config)
        assert _contem(alertas, "Configuração tributária não encontrada para XX")


class TestAlertasDimensionamento:
    def test_subdimensionado(self, entrada_residencial, config_com_isencao):
        entrada = entrada_residencial.model_copy(update={"potencia_instalada_kwp": 1.0})
        assert _contem(_alertas(entrada, config_com_isencao), "subdimensionada")

    def test_excedente_nao_creditado(self, entrada_residencial, config_com_isencao):
        entrada = entrada_residencial.model_copy(update={"potencia_instalada_kwp": 5.0})
        assert _contem(_alertas(entrada, config_com_isencao), "Geração estimada excede o consumo")


class TestAlertasRegulatorios:
    def test_sem_isencao_colapsa_cenarios(self, entrada_residencial, config_sem_isencao):
        assert _contem(_alertas(entrada_residencial, config_sem_isencao), "cenário otimista igual")

    def test_gd1(self, entrada_residencial, config_com_isencao):
        entrada = entrada_residencial.model_copy(update={"regime": RegimeCompensacao.GD1})
        assert _contem(_alertas(entrada, config_com_isencao), "Regime GD I")

    def test_teto_atingido(self, entrada_residencial, config_com_isencao):
        entrada = entrada_residencial.model_copy(update={"ano_base": 2030})
        assert _contem(_alertas(entrada, config_com_isencao), "já atingiu o teto")

    def test_escalonamento_customizado(self, entrada_residencial, config_com_isencao):
        esc = EscalonamentoFioB.de_tabela({2020: 45})
        assert _contem(_alertas(entrada_residencial, config_com_isencao, esc), "teto de 45,00%")


class TestAlertasCenario:
    def test_payback_nao_atingido(self, entrada_residencial, config_com_isencao):
        entrada = entrada_residencial.model_copy(update={"investimento_total": 500000})
        alertas = _alertas(entrada, config_com_isencao)
        assert _contem(alertas, "Cenário Conservador: payback não atingido em 25 anos")
        assert _contem(alertas, "Cenário Otimista: payback não atingido em 25 anos")

    def test_anos_com_saldo_negativo(self, entrada_residencial, config_com_isencao):
        config = config_com_isencao.model_copy(update={"encargos_fixos_mensais": 1000})
        assert _contem(_alertas(entrada_residencial, config), "economia líquida considerada zero")
