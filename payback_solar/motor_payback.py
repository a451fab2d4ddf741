import logging
from typing import Any, Mapping

from pydantic import ValidationError

from payback_solar.alertas import gerar_alertas
from payback_solar.config import settings
from payback_solar.erros import EntradaInvalida, InstabilidadeNumerica, traduzir_erro_validacao
from payback_solar.escalonamento_fio_b import ESCALONAMENTO_PADRAO
from payback_solar.models import (
    ConfigRegimeTarifario,
    EntradaCalculo,
    EscalonamentoFioB,
    Projecao,
    ResultadoPayback,
    ResumoCenario,
)
from payback_solar.projecao import projetar
from payback_solar.tir import calcular_tir, verificar_tir

logger = logging.getLogger(__name__)


class MotorPayback:
    """Pure payback computation: conservative and optimistic scenarios over the horizon."""

    def __init__(self, entrada: EntradaCalculo | Mapping[str, Any],
                 config: ConfigRegimeTarifario | Mapping[str, Any],
                 escalonamento: EscalonamentoFioB | None = None):
        self.entrada = entrada
        self.config = config
        self.escalonamento = escalonamento

    def calcular(self) -> ResultadoPayback:
        self._validar()
        self._projetar()
        self._avaliar_tir()
        return self._montar_resultado()

    def _validar(self):
        """Fail fast on invalid input; nothing is computed past this point."""
        try:
            self.entrada = EntradaCalculo.model_validate(_como_dict(self.entrada))
            self.config = ConfigRegimeTarifario.model_validate(_como_dict(self.config))
        except ValidationError as e:
            raise EntradaInvalida(traduzir_erro_validacao(e)) from e

        self.escalonamento_padrao = self.escalonamento is None
        if self.escalonamento_padrao:
            self.escalonamento = ESCALONAMENTO_PADRAO

    def _projetar(self):
        logger.info(
            "Calculando payback: %.0f kWh/mês, %.2f kWp, investimento %.2f, %d anos",
            self.entrada.consumo_mensal_kwh,
            self.entrada.potencia_instalada_kwp,
            self.entrada.investimento_total,
            self.entrada.horizonte_anos,
            extra={"uf": self.config.uf},
        )
        self.projecao: Projecao = projetar(self.entrada, self.config, self.escalonamento)

    def _avaliar_tir(self):
        self.conservador = self._tir_cenario(self.projecao.conservador)
        self.otimista = self._tir_cenario(self.projecao.otimista)

    def _tir_cenario(self, resumo: ResumoCenario) -> ResumoCenario:
        investimento = self.entrada.investimento_total
        fluxos = [r.economia_liquida for r in resumo.serie_anual]
        taxa = calcular_tir(
            investimento,
            fluxos,
            estimativa=settings.tir_estimativa_inicial,
            max_iteracoes=settings.tir_max_iteracoes,
            tolerancia=settings.tir_tolerancia,
        )
        try:
            verificar_tir(
                taxa,
                investimento,
                fluxos,
                tolerancia=settings.tir_tolerancia,
                faixa=(settings.tir_faixa_min, settings.tir_faixa_max),
            )
            confiavel = True
        except InstabilidadeNumerica as e:
            logger.warning("TIR instável no cenário %s: %s", resumo.rotulo, e,
                           extra={"taxa": e.taxa})
            confiavel = False

        return resumo.model_copy(update={"tir_anual_pct": taxa * 100, "tir_confiavel": confiavel})

    def _montar_resultado(self) -> ResultadoPayback:
        alertas = gerar_alertas(
            self.entrada,
            self.config,
            self.conservador,
            self.otimista,
            escalonamento=self.escalonamento,
            escalonamento_padrao=self.escalonamento_padrao,
        )
        for alerta in alertas:
            logger.debug("Alerta: %s", alerta)

        logger.info(
            "Payback conservador %.2f anos, otimista %.2f anos (%d alertas)",
            self.conservador.payback_anos, self.otimista.payback_anos, len(alertas),
        )

        return ResultadoPayback(
            conservador=self.conservador,
            otimista=self.otimista,
            config_usada=self.config,
            alertas=alertas,
            fio_b_impacto_anual=self.projecao.fio_b_impacto_anual,
        )


def _como_dict(valor: Any) -> Any:
    if isinstance(valor, (EntradaCalculo, ConfigRegimeTarifario)):
        return valor.model_dump()
    return valor


def calcular_payback(entrada: EntradaCalculo | Mapping[str, Any],
                     config: ConfigRegimeTarifario | Mapping[str, Any],
                     escalonamento: EscalonamentoFioB | None = None) -> ResultadoPayback:
    """Single request/response contract consumed by reports, charts and batch jobs.

    ``payback_anos == 0`` in either scenario means payback was not reached
    within ``horizonte_anos``.
    """
    return MotorPayback(entrada, config, escalonamento).calcular()
