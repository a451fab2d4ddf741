from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from payback_solar.constantes import ANO_FIM_GD1, PAYBACK_NAO_ATINGIDO

TipoLigacao = Literal["monofasico", "bifasico", "trifasico"]
OrigemTributaria = Literal["concessionaria", "estado", "padrao"]


class Cenario(str, Enum):
    CONSERVADOR = "conservador"
    OTIMISTA = "otimista"


class RegimeCompensacao(str, Enum):
    GD1 = "gd1"
    GD2 = "gd2"


class _ModeloContrato(BaseModel):
    """Immutable model exposed with camelCase aliases (economiaLiquida, paybackAnos...)."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Entradas
# ---------------------------------------------------------------------------

class EntradaCalculo(_ModeloContrato):
    consumo_mensal_kwh: float = Field(..., gt=0)
    tarifa_kwh: float = Field(..., gt=0)              # R$/kWh com impostos
    potencia_instalada_kwp: float = Field(..., gt=0)
    investimento_total: float = Field(..., gt=0)
    reajuste_anual_tarifa_pct: float = Field(default=5.0, ge=-50, le=100)
    degradacao_anual_painel_pct: float = Field(default=0.8, ge=0, lt=100)
    horizonte_anos: int = Field(default=25, ge=1, le=50)
    fator_geracao_kwh_kwp: Optional[float] = Field(default=None, gt=0)  # kWh/kWp/mês
    ano_base: Optional[int] = Field(default=None, ge=2000, le=2100)
    regime: RegimeCompensacao = RegimeCompensacao.GD2
    taxa_desconto_pct: float = Field(default=9.67, ge=0, le=100)


class ConfigRegimeTarifario(_ModeloContrato):
    icms_pct: float = Field(..., ge=0, le=100)
    percentual_fio_b_atual: float = Field(default=0.0, ge=0, le=100)
    encargos_fixos_mensais: float = Field(default=0.0, ge=0)  # disponibilidade + taxas
    isencao_scee_disponivel: bool = False
    percentual_isencao_scee: float = Field(default=0.0, ge=0, le=100)
    tarifa_fio_b_kwh: Optional[float] = Field(default=None, ge=0)  # TUSD Fio B R$/kWh
    origem_tributaria: OrigemTributaria = "estado"
    uf: Optional[str] = None


class FaixaFioB(BaseModel):
    model_config = ConfigDict(frozen=True)

    ano: int = Field(..., ge=2000, le=2100)
    percentual: float = Field(..., ge=0, le=100)  # % do Fio B não compensado


class EscalonamentoFioB(BaseModel):
    """Versionable Fio B phase-in table.

    The law only ramps up: years must be unique and ascending and the
    percentages non-decreasing. Before the first year nothing is charged;
    after the last one the ceiling holds.
    """

    model_config = ConfigDict(frozen=True)

    faixas: list[FaixaFioB] = Field(..., min_length=1)
    ano_fim_gd1: int = ANO_FIM_GD1

    @model_validator(mode="after")
    def _validar_rampa(self):
        anos = [f.ano for f in self.faixas]
        if anos != sorted(set(anos)):
            raise ValueError("anos do escalonamento Fio B devem ser únicos e crescentes")
        for anterior, atual in zip(self.faixas, self.faixas[1:]):
            if atual.percentual < anterior.percentual:
                raise ValueError(
                    f"escalonamento Fio B decrescente entre {anterior.ano} "
                    f"({anterior.percentual}%) e {atual.ano} ({atual.percentual}%)"
                )
        return self

    @classmethod
    def de_tabela(cls, tabela: dict[int, float], ano_fim_gd1: int = ANO_FIM_GD1) -> "EscalonamentoFioB":
        faixas = [FaixaFioB(ano=ano, percentual=pct) for ano, pct in sorted(tabela.items())]
        return cls(faixas=faixas, ano_fim_gd1=ano_fim_gd1)

    @property
    def teto(self) -> float:
        return self.faixas[-1].percentual

    @property
    def ano_teto(self) -> int:
        return next(f.ano for f in self.faixas if f.percentual >= self.teto)

    def percentual_para_ano(self, ano: int) -> float:
        percentual = 0.0
        for faixa in self.faixas:
            if faixa.ano > ano:
                break
            percentual = faixa.percentual
        return percentual

    def ano_do_percentual(self, percentual: float) -> int:
        """Last year whose step does not exceed ``percentual``.

        Below the first step this is the year before the table.
        """
        ano = self.faixas[0].ano - 1
        for faixa in self.faixas:
            if faixa.percentual > percentual:
                break
            ano = faixa.ano
        return ano


class PremissasCenario(BaseModel):
    model_config = ConfigDict(frozen=True)

    cenario: Cenario
    rotulo: str
    aplica_isencao_icms: bool


# ---------------------------------------------------------------------------
# Dados regionais
# ---------------------------------------------------------------------------

class ConfigTributaria(BaseModel):
    uf: str
    aliquota_icms: float = Field(..., ge=0, le=100)
    possui_isencao_scee: bool = False
    percentual_isencao: float = Field(default=0.0, ge=0, le=100)
    observacoes: str = ""


class DadosConcessionaria(BaseModel):
    """Distributor-level overrides; None falls back to the state table."""

    nome: str = ""
    uf: Optional[str] = None
    aliquota_icms: Optional[float] = Field(default=None, ge=0, le=100)
    possui_isencao_scee: Optional[bool] = None
    percentual_isencao: Optional[float] = Field(default=None, ge=0, le=100)
    tarifa_fio_b_kwh: Optional[float] = Field(default=None, gt=0)
    custo_disponibilidade: Optional[float] = Field(default=None, ge=0)


# ---------------------------------------------------------------------------
# Resultados
# ---------------------------------------------------------------------------

class ResultadoAnoCenario(_ModeloContrato):
    ano: int = Field(..., ge=1)
    ano_calendario: int
    kwh_compensado: float          # anual, já degradado
    tarifa_compensavel_liquida: float
    percentual_fio_b: float
    economia_bruta: float
    custo_fio_b: float = Field(..., ge=0)
    conta_inevitavel: float = Field(..., ge=0)
    conta_sem_solar: float = Field(..., ge=0)
    saldo_antes_piso: float        # pode ser negativo
    economia_liquida: float = Field(..., ge=0)


class ResumoCenario(_ModeloContrato):
    rotulo: str
    # valores mensais do ano 1
    economia_bruta: float
    custo_fio_b: float
    conta_inevitavel: float
    tarifa_compensavel_liquida: float
    kwh_compensado: float
    percentual_fio_b: float
    economia_liquida: float
    # horizonte
    payback_anos: float = PAYBACK_NAO_ATINGIDO
    payback_meses: float = PAYBACK_NAO_ATINGIDO
    economia_acumulada: float
    roi_pct: float
    vpl: float
    tir_anual_pct: Optional[float] = None
    tir_confiavel: bool = False
    serie_anual: list[ResultadoAnoCenario]

    @property
    def payback_atingido(self) -> bool:
        return self.payback_anos > PAYBACK_NAO_ATINGIDO


class ImpactoFioBAno(_ModeloContrato):
    ano: int
    ano_calendario: int
    percentual: float
    custo_fio_b: float
    economia_liquida: float
    economia_liquida_otimista: float


class Projecao(BaseModel):
    conservador: ResumoCenario
    otimista: ResumoCenario
    fio_b_impacto_anual: list[ImpactoFioBAno]


class ResultadoPayback(_ModeloContrato):
    conservador: ResumoCenario
    otimista: ResumoCenario
    config_usada: ConfigRegimeTarifario
    alertas: list[str] = Field(default_factory=list)
    fio_b_impacto_anual: list[ImpactoFioBAno]
