"""Economics of a single projection year under one assumption set.

Each year is computed in five steps:

1. compensated kWh, capped at consumption and degraded since year 1;
2. compensable tariff net of ICMS (exemption only in the optimistic set);
3. gross savings at the escalated tariff;
4. Fio B charged on compensated energy, in every scenario;
5. unavoidable bill (availability cost + fixed fees).

Net savings are floored at zero and never exceed the bill without solar.
"""

import logging

from payback_solar.config import settings
from payback_solar.constantes import ROTULOS_CENARIO
from payback_solar.erros import EntradaInvalida
from payback_solar.escalonamento_fio_b import (
    ESCALONAMENTO_PADRAO,
    ano_calendario,
    ano_inicial,
    resolver_isencao,
    resolver_percentual_fio_b,
)
from payback_solar.models import (
    Cenario,
    ConfigRegimeTarifario,
    EntradaCalculo,
    EscalonamentoFioB,
    PremissasCenario,
    RegimeCompensacao,
    ResultadoAnoCenario,
)

logger = logging.getLogger(__name__)

PREMISSAS = {
    Cenario.CONSERVADOR: PremissasCenario(
        cenario=Cenario.CONSERVADOR,
        rotulo=ROTULOS_CENARIO["conservador"],
        aplica_isencao_icms=False,
    ),
    Cenario.OTIMISTA: PremissasCenario(
        cenario=Cenario.OTIMISTA,
        rotulo=ROTULOS_CENARIO["otimista"],
        aplica_isencao_icms=True,
    ),
}


def geracao_mensal_kwh(entrada: EntradaCalculo) -> float:
    fator = entrada.fator_geracao_kwh_kwp or settings.fator_geracao_kwh_kwp
    return entrada.potencia_instalada_kwp * fator


def kwh_compensado_mensal(entrada: EntradaCalculo) -> float:
    # Excedente não é creditado: compensação limitada ao consumo do mês
    return min(entrada.consumo_mensal_kwh, geracao_mensal_kwh(entrada))


def tarifa_compensavel_liquida(entrada: EntradaCalculo, config: ConfigRegimeTarifario,
                               premissas: PremissasCenario) -> float:
    icms = config.icms_pct / 100.0
    disponivel, percentual = resolver_isencao(config)
    if premissas.aplica_isencao_icms and disponivel:
        icms *= 1 - percentual / 100.0
    return entrada.tarifa_kwh * (1 - icms)


def percentual_fio_b_ano(entrada: EntradaCalculo, config: ConfigRegimeTarifario, ano: int,
                         escalonamento: EscalonamentoFioB | None = None) -> float:
    escalonamento = escalonamento or ESCALONAMENTO_PADRAO
    ano_base = ano_inicial(entrada.ano_base, config.percentual_fio_b_atual, escalonamento)
    gd1_isento = ano_calendario(ano_base, ano) <= escalonamento.ano_fim_gd1
    if entrada.regime == RegimeCompensacao.GD1 and gd1_isento:
        return 0.0
    percentual = resolver_percentual_fio_b(ano_base, ano, escalonamento)
    return max(percentual, config.percentual_fio_b_atual)


def calcular_ano(entrada: EntradaCalculo, config: ConfigRegimeTarifario, ano: int,
                 cenario: Cenario | str,
                 escalonamento: EscalonamentoFioB | None = None) -> ResultadoAnoCenario:
    if not 1 <= ano <= entrada.horizonte_anos:
        raise EntradaInvalida(
            f"ano {ano} fora do horizonte de 1 a {entrada.horizonte_anos} anos"
        )
    premissas = PREMISSAS[Cenario(cenario)]
    ano_base = ano_inicial(entrada.ano_base, config.percentual_fio_b_atual, escalonamento)

    fator_degradacao = (1 - entrada.degradacao_anual_painel_pct / 100.0) ** (ano - 1)
    fator_reajuste = (1 + entrada.reajuste_anual_tarifa_pct / 100.0) ** (ano - 1)

    kwh_compensado = kwh_compensado_mensal(entrada) * fator_degradacao * 12
    tarifa_liquida = tarifa_compensavel_liquida(entrada, config, premissas)
    economia_bruta = kwh_compensado * tarifa_liquida * fator_reajuste

    percentual_fio_b = percentual_fio_b_ano(entrada, config, ano, escalonamento)
    tarifa_fio_b = (
        config.tarifa_fio_b_kwh
        if config.tarifa_fio_b_kwh is not None
        else settings.tarifa_fio_b_padrao
    )
    # Fio B a preço constante, sem reajuste
    custo_fio_b = kwh_compensado * tarifa_fio_b * percentual_fio_b / 100.0

    conta_inevitavel = config.encargos_fixos_mensais * 12 * fator_reajuste
    conta_sem_solar = entrada.consumo_mensal_kwh * 12 * entrada.tarifa_kwh * fator_reajuste

    saldo = economia_bruta - custo_fio_b - conta_inevitavel
    economia_liquida = min(max(0.0, saldo), conta_sem_solar)

    logger.debug(
        "%s ano %d: bruta=%.2f fio_b=%.2f (%.0f%%) inevitavel=%.2f liquida=%.2f",
        premissas.rotulo, ano, economia_bruta, custo_fio_b, percentual_fio_b,
        conta_inevitavel, economia_liquida,
        extra={"cenario": premissas.cenario.value, "ano": ano},
    )

    return ResultadoAnoCenario(
        ano=ano,
        ano_calendario=ano_calendario(ano_base, ano),
        kwh_compensado=kwh_compensado,
        tarifa_compensavel_liquida=tarifa_liquida * fator_reajuste,
        percentual_fio_b=percentual_fio_b,
        economia_bruta=economia_bruta,
        custo_fio_b=custo_fio_b,
        conta_inevitavel=conta_inevitavel,
        conta_sem_solar=conta_sem_solar,
        saldo_antes_piso=saldo,
        economia_liquida=economia_liquida,
    )
