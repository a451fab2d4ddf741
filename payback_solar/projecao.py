"""25-year projection of both scenarios.

Payback is linearly interpolated inside the crossing year. When cumulative
savings never reach the investment within the horizon, ``payback_anos`` is
PAYBACK_NAO_ATINGIDO (0), meaning "not reached", never "year zero".
"""

import logging
from typing import Sequence

import numpy_financial as npf

from payback_solar.constantes import PAYBACK_NAO_ATINGIDO
from payback_solar.economia_cenario import PREMISSAS, calcular_ano
from payback_solar.models import (
    Cenario,
    ConfigRegimeTarifario,
    EntradaCalculo,
    EscalonamentoFioB,
    ImpactoFioBAno,
    Projecao,
    ResultadoAnoCenario,
    ResumoCenario,
)

logger = logging.getLogger(__name__)


def payback_interpolado(economias_anuais: Sequence[float], investimento: float) -> float:
    acumulado = 0.0
    for ano, economia in enumerate(economias_anuais, start=1):
        anterior = acumulado
        acumulado += economia
        if acumulado >= investimento:
            return (ano - 1) + (investimento - anterior) / economia
    return PAYBACK_NAO_ATINGIDO


def economia_acumulada_em(economias_anuais: Sequence[float], anos: float) -> float:
    """Cumulative savings at a fractional year, linear within each year."""
    acumulado = 0.0
    for ano, economia in enumerate(economias_anuais, start=1):
        if anos <= ano - 1:
            break
        acumulado += economia * min(1.0, anos - (ano - 1))
    return acumulado


def _resumir(entrada: EntradaCalculo, cenario: Cenario,
             serie: list[ResultadoAnoCenario]) -> ResumoCenario:
    economias = [r.economia_liquida for r in serie]
    economia_acumulada = sum(economias)
    payback_anos = payback_interpolado(economias, entrada.investimento_total)
    vpl = npf.npv(entrada.taxa_desconto_pct / 100.0, [-entrada.investimento_total, *economias])
    primeiro = serie[0]

    return ResumoCenario(
        rotulo=PREMISSAS[cenario].rotulo,
        economia_bruta=primeiro.economia_bruta / 12,
        custo_fio_b=primeiro.custo_fio_b / 12,
        conta_inevitavel=primeiro.conta_inevitavel / 12,
        tarifa_compensavel_liquida=primeiro.tarifa_compensavel_liquida,
        kwh_compensado=primeiro.kwh_compensado / 12,
        percentual_fio_b=primeiro.percentual_fio_b,
        economia_liquida=primeiro.economia_liquida / 12,
        payback_anos=payback_anos,
        payback_meses=payback_anos * 12,
        economia_acumulada=economia_acumulada,
        roi_pct=(economia_acumulada - entrada.investimento_total) / entrada.investimento_total * 100,
        vpl=float(vpl),
        serie_anual=serie,
    )


def projetar_cenario(entrada: EntradaCalculo, config: ConfigRegimeTarifario, cenario: Cenario,
                     escalonamento: EscalonamentoFioB | None = None) -> ResumoCenario:
    serie = [
        calcular_ano(entrada, config, ano, cenario, escalonamento)
        for ano in range(1, entrada.horizonte_anos + 1)
    ]
    resumo = _resumir(entrada, cenario, serie)
    logger.debug(
        "%s: payback=%.2f anos, acumulado=%.2f, ROI=%.1f%%",
        resumo.rotulo, resumo.payback_anos, resumo.economia_acumulada, resumo.roi_pct,
        extra={"cenario": cenario.value},
    )
    return resumo


def projetar(entrada: EntradaCalculo, config: ConfigRegimeTarifario,
             escalonamento: EscalonamentoFioB | None = None) -> Projecao:
    conservador = projetar_cenario(entrada, config, Cenario.CONSERVADOR, escalonamento)
    otimista = projetar_cenario(entrada, config, Cenario.OTIMISTA, escalonamento)

    # Fio B não depende do cenário: percentual e custo vêm do conservador
    impacto = [
        ImpactoFioBAno(
            ano=c.ano,
            ano_calendario=c.ano_calendario,
            percentual=c.percentual_fio_b,
            custo_fio_b=c.custo_fio_b,
            economia_liquida=c.economia_liquida,
            economia_liquida_otimista=o.economia_liquida,
        )
        for c, o in zip(conservador.serie_anual, otimista.serie_anual)
    ]

    return Projecao(conservador=conservador, otimista=otimista, fio_b_impacto_anual=impacto)
