import pytest

from payback_solar.dados_tarifarios import (
    carregar_config_tributaria,
    carregar_escalonamento_fio_b,
    custo_disponibilidade,
    listar_ufs,
    montar_config_regime,
    obter_config_tributaria,
)
from payback_solar.erros import EntradaInvalida, LacunaDeDados
from payback_solar.models import DadosConcessionaria


@pytest.fixture
def csv_tributaria(tmp_path):
    caminho = tmp_path / "tributaria.csv"
    caminho.write_text(
        "estado;aliquota_icms;possui_isencao_scee;percentual_isencao;observacoes\n"
        "mg;18,00;sim;100,00;\n"
        "SP;18,00;não;,00;sem convênio\n"
        "BA;20,50;sim;50,00;parcial\n",
        encoding="utf-8",
    )
    return caminho


class TestEscalonamentoCsv:
    def test_tabela_empacotada(self):
        esc = carregar_escalonamento_fio_b()
        assert esc.percentual_para_ano(2025) == 45
        assert esc.teto == 90

    def test_arquivo_ausente(self, tmp_path):
        with pytest.raises(LacunaDeDados):
            carregar_escalonamento_fio_b(tmp_path / "nao_existe.csv")

    def test_rampa_decrescente(self, tmp_path):
        caminho = tmp_path / "fio_b.csv"
        caminho.write_text("ano;percentual_nao_compensado\n2023;30,00\n2024;15,00\n", encoding="utf-8")
        with pytest.raises(EntradaInvalida):
            carregar_escalonamento_fio_b(caminho)

    def test_coluna_ausente(self, tmp_path):
        caminho = tmp_path / "fio_b.csv"
        caminho.write_text("ano;pct\n2023;15\n", encoding="utf-8")
        with pytest.raises(LacunaDeDados, match="percentual_nao_compensado"):
            carregar_escalonamento_fio_b(caminho)


class TestConfigTributaria:
    def test_tabela_empacotada_tem_27_ufs(self):
        assert len(listar_ufs(carregar_config_tributaria())) == 27

    def test_conversao_de_valores(self, csv_tributaria):
        df = carregar_config_tributaria(csv_tributaria)
        assert listar_ufs(df) == ["BA", "MG", "SP"]

        ba = obter_config_tributaria(df, "ba")
        assert ba.aliquota_icms == 20.5
        assert ba.possui_isencao_scee
        assert ba.percentual_isencao == 50

        sp = obter_config_tributaria(df, "SP")
        assert not sp.possui_isencao_scee
        assert sp.percentual_isencao == 0

    def test_alteracao_nao_contamina_cache(self, csv_tributaria):
        df = carregar_config_tributaria(csv_tributaria)
        df["aliquota_icms"] = 0.0
        df.drop(df.index, inplace=True)

        novamente = carregar_config_tributaria(csv_tributaria)
        assert len(novamente) == 3
        assert obter_config_tributaria(novamente, "MG").aliquota_icms == 18

    def test_uf_ausente(self, csv_tributaria):
        with pytest.raises(LacunaDeDados):
            obter_config_tributaria(carregar_config_tributaria(csv_tributaria), "RJ")


class TestCustoDisponibilidade:
    @pytest.mark.parametrize("tipo, custo", [("monofasico", 30), ("bifasico", 50), ("trifasico", 100)])
    def test_por_tipo(self, tipo, custo):
        assert custo_disponibilidade(tipo) == custo

    def test_override(self):
        assert custo_disponibilidade("monofasico", 42.0) == 42.0

    def test_tipo_invalido(self):
        with pytest.raises(EntradaInvalida):
            custo_disponibilidade("quadrifasico")


class TestMontarConfigRegime:
    def test_estado(self, csv_tributaria):
        df = carregar_config_tributaria(csv_tributaria)
        config = montar_config_regime("MG", "bifasico", df_tributaria=df, ano=2025)
        assert config.icms_pct == 18
        assert config.isencao_scee_disponivel
        assert config.percentual_isencao_scee == 100
        assert config.percentual_fio_b_atual == 45
        assert config.encargos_fixos_mensais == 50
        assert config.origem_tributaria == "estado"
        assert config.uf == "MG"

    def test_uf_desconhecida_usa_padrao(self, csv_tributaria):
        df = carregar_config_tributaria(csv_tributaria)
        config = montar_config_regime("XX", df_tributaria=df, ano=2025)
        assert config.origem_tributaria == "padrao"
        assert config.icms_pct == 18
        assert not config.isencao_scee_disponivel

    def test_concessionaria_prevalece(self, csv_tributaria):
        df = carregar_config_tributaria(csv_tributaria)
        concessionaria = DadosConcessionaria(
            nome="Distribuidora", aliquota_icms=25, tarifa_fio_b_kwh=0.31, custo_disponibilidade=45,
        )
        config = montar_config_regime("SP", "monofasico", concessionaria=concessionaria,
                                      df_tributaria=df, ano=2027, taxas_fixas_mensais=10)
        assert config.origem_tributaria == "concessionaria"
        assert config.icms_pct == 25
        # isenção herdada do estado
        assert not config.isencao_scee_disponivel
        assert config.tarifa_fio_b_kwh == 0.31
        assert config.encargos_fixos_mensais == 55
        assert config.percentual_fio_b_atual == 75

    def test_somente_tarifa_fio_b_mantem_origem_estado(self, csv_tributaria):
        df = carregar_config_tributaria(csv_tributaria)
        concessionaria = DadosConcessionaria(tarifa_fio_b_kwh=0.28)
        config = montar_config_regime("BA", concessionaria=concessionaria, df_tributaria=df, ano=2025)
        assert config.origem_tributaria == "estado"
        assert config.icms_pct == 20.5
        assert config.tarifa_fio_b_kwh == 0.28
