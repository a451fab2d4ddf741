"""Fio B phase-in (Lei 14.300) and SCEE ICMS exemption lookup."""

from payback_solar.constantes import ANO_FIM_GD1, ESCALONAMENTO_LEI_14300
from payback_solar.erros import EntradaInvalida
from payback_solar.models import ConfigRegimeTarifario, EscalonamentoFioB

ESCALONAMENTO_PADRAO = EscalonamentoFioB.de_tabela(ESCALONAMENTO_LEI_14300, ano_fim_gd1=ANO_FIM_GD1)


def ano_inicial(ano_base: int | None, percentual_atual: float,
                escalonamento: EscalonamentoFioB | None = None) -> int:
    """Calendar year of projection year 1.

    Without ``ano_base`` the phase-in is anchored on the step already
    reached by ``percentual_atual``, so year 1 charges exactly that value
    and later years follow the table from there.
    """
    if ano_base is not None:
        return ano_base
    escalonamento = escalonamento or ESCALONAMENTO_PADRAO
    return escalonamento.ano_do_percentual(percentual_atual)


def ano_calendario(ano_base: int, ano_offset: int) -> int:
    """Projection year 1 is ano_base itself."""
    if ano_offset <= 0:
        raise EntradaInvalida(f"ano da projeção deve ser >= 1 (recebido {ano_offset})")
    return ano_base + ano_offset - 1


def resolver_percentual_fio_b(ano_base: int, ano_offset: int,
                              escalonamento: EscalonamentoFioB | None = None) -> float:
    """Percentage (0-100) of Fio B charged on compensated energy.

    Beyond the table the plateau holds; the value never extrapolates upward.
    """
    escalonamento = escalonamento or ESCALONAMENTO_PADRAO
    return escalonamento.percentual_para_ano(ano_calendario(ano_base, ano_offset))


def resolver_isencao(config: ConfigRegimeTarifario) -> tuple[bool, float]:
    """SCEE exemption is state policy data, echoed as supplied."""
    return config.isencao_scee_disponivel, config.percentual_isencao_scee
