"""Internal rate of return (TIR) by Newton-Raphson.

f(r)  = -I + sum(CF_t / (1+r)^t)
f'(r) = sum(-t * CF_t / (1+r)^(t+1))

Convergence is not guaranteed for pathological cash flows (e.g. all
non-positive). ``calcular_tir`` always returns its last iterate;
``verificar_tir`` decides whether that iterate can be shown as fact.
"""

import logging
import math
from typing import Sequence

import numpy as np
import numpy_financial as npf

from payback_solar.erros import InstabilidadeNumerica

logger = logging.getLogger(__name__)

DERIVADA_MINIMA = 1e-10


def calcular_tir(investimento_inicial: float, fluxos_anuais: Sequence[float],
                 estimativa: float = 0.10, max_iteracoes: int = 50,
                 tolerancia: float = 1.0) -> float:
    """Annualized rate as a fraction (0.17 = 17%)."""
    fluxos = np.asarray(fluxos_anuais, dtype=np.float64)
    t = np.arange(1, len(fluxos) + 1, dtype=np.float64)
    taxa = float(estimativa)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        for _ in range(max_iteracoes):
            desconto = (1.0 + taxa) ** t
            vpl = -investimento_inicial + float(np.sum(fluxos / desconto))
            if not math.isfinite(vpl) or abs(vpl) < tolerancia:
                break
            derivada = float(np.sum(-t * fluxos / (desconto * (1.0 + taxa))))
            if not math.isfinite(derivada) or abs(derivada) < DERIVADA_MINIMA:
                break
            taxa -= vpl / derivada
            if not math.isfinite(taxa):
                break

    logger.debug("TIR %.6f (estimativa inicial %.2f)", taxa, estimativa)
    return taxa


def verificar_tir(taxa: float, investimento_inicial: float, fluxos_anuais: Sequence[float],
                  tolerancia: float = 1.0, faixa: tuple[float, float] = (-0.99, 10.0)) -> float:
    """Return ``taxa`` if plausible, else raise InstabilidadeNumerica."""
    if not math.isfinite(taxa):
        raise InstabilidadeNumerica("TIR não finita", taxa)
    minimo, maximo = faixa
    if not minimo <= taxa <= maximo:
        raise InstabilidadeNumerica(
            f"TIR {taxa:.2%} fora da faixa plausível [{minimo:.0%}, {maximo:.0%}]", taxa
        )
    vpl = npf.npv(taxa, [-investimento_inicial, *fluxos_anuais])
    if not math.isfinite(vpl) or abs(vpl) >= tolerancia:
        raise InstabilidadeNumerica(f"TIR não convergiu (VPL residual {vpl:.2f})", taxa)
    return taxa
