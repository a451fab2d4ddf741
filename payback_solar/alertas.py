"""Advisory alerts attached to every payback result.

Alerts never interrupt the computation: the result is always returned,
annotated with whatever the caller should double-check before presenting
it to a customer.
"""

from payback_solar.config import settings
from payback_solar.economia_cenario import geracao_mensal_kwh, percentual_fio_b_ano
from payback_solar.escalonamento_fio_b import ESCALONAMENTO_PADRAO, resolver_isencao
from payback_solar.formatacao import formatar_kwh, formatar_moeda, formatar_percentual
from payback_solar.models import (
    ConfigRegimeTarifario,
    EntradaCalculo,
    EscalonamentoFioB,
    RegimeCompensacao,
    ResumoCenario,
)


def _alertas_dados(entrada: EntradaCalculo, config: ConfigRegimeTarifario,
                   escalonamento_padrao: bool) -> list[str]:
    alertas = []
    if config.origem_tributaria == "padrao":
        uf = f" para {config.uf}" if config.uf else ""
        alertas.append(
            f"Configuração tributária não encontrada{uf}. "
            f"Usando ICMS padrão de {formatar_percentual(config.icms_pct / 100)} sem isenção SCEE."
        )
    if escalonamento_padrao:
        alertas.append("Escalonamento do Fio B não configurado. Usando valores padrão da Lei 14.300.")
    if config.tarifa_fio_b_kwh is None:
        alertas.append(
            "Recomendado configurar tarifa Fio B da concessionária para maior precisão "
            f"(usando {formatar_moeda(settings.tarifa_fio_b_padrao)}/kWh)."
        )
    if entrada.fator_geracao_kwh_kwp is None:
        alertas.append(
            "Fator de geração não informado. Usando "
            f"{settings.fator_geracao_kwh_kwp:.0f} kWh/kWp/mês (média nacional)."
        )
    return alertas


def _alertas_dimensionamento(entrada: EntradaCalculo) -> list[str]:
    geracao = geracao_mensal_kwh(entrada)
    cobertura = geracao / entrada.consumo_mensal_kwh
    if cobertura < settings.limiar_subdimensionamento:
        return [
            "Potência instalada subdimensionada para o consumo: geração estimada de "
            f"{formatar_kwh(geracao)}/mês cobre apenas {formatar_percentual(cobertura)} do consumo."
        ]
    if geracao > entrada.consumo_mensal_kwh:
        excedente = geracao - entrada.consumo_mensal_kwh
        return [
            f"Geração estimada excede o consumo em {formatar_kwh(excedente)}/mês. "
            "O excedente não é considerado como economia nesta simulação."
        ]
    return []


def _alertas_regulatorios(entrada: EntradaCalculo, config: ConfigRegimeTarifario,
                          escalonamento: EscalonamentoFioB) -> list[str]:
    alertas = []
    disponivel, percentual = resolver_isencao(config)
    if not disponivel or percentual == 0 or config.icms_pct == 0:
        alertas.append(
            "Sem isenção de ICMS (SCEE) aplicável: cenário otimista igual ao conservador."
        )

    if entrada.regime == RegimeCompensacao.GD1:
        alertas.append(
            f"Regime GD I: sem cobrança de Fio B até {escalonamento.ano_fim_gd1}."
        )
    elif percentual_fio_b_ano(entrada, config, 1, escalonamento) >= escalonamento.teto:
        alertas.append(
            f"Escalonamento do Fio B já atingiu o teto de {formatar_percentual(escalonamento.teto / 100)}: "
            "nenhum aumento adicional modelado."
        )
    return alertas


def _alertas_cenario(entrada: EntradaCalculo, resumo: ResumoCenario) -> list[str]:
    alertas = []
    anos_negativos = sum(1 for r in resumo.serie_anual if r.saldo_antes_piso < 0)
    if anos_negativos:
        alertas.append(
            f"Cenário {resumo.rotulo}: Fio B e conta inevitável superam a economia bruta em "
            f"{anos_negativos} ano(s); economia líquida considerada zero nesses anos."
        )
    if not resumo.payback_atingido:
        alertas.append(
            f"Cenário {resumo.rotulo}: payback não atingido em {entrada.horizonte_anos} anos. "
            "Revise as premissas."
        )
    if resumo.tir_anual_pct is not None and not resumo.tir_confiavel:
        alertas.append(
            f"Cenário {resumo.rotulo}: TIR não convergiu ou ficou fora da faixa plausível; "
            "valor apenas estimativo."
        )
    return alertas


def gerar_alertas(entrada: EntradaCalculo, config: ConfigRegimeTarifario,
                  conservador: ResumoCenario, otimista: ResumoCenario,
                  escalonamento: EscalonamentoFioB | None = None,
                  escalonamento_padrao: bool = False) -> list[str]:
    escalonamento = escalonamento or ESCALONAMENTO_PADRAO
    alertas = _alertas_dados(entrada, config, escalonamento_padrao)
    alertas += _alertas_dimensionamento(entrada)
    alertas += _alertas_regulatorios(entrada, config, escalonamento)
    alertas += _alertas_cenario(entrada, conservador)
    alertas += _alertas_cenario(entrada, otimista)
    return alertas
