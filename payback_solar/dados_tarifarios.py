import logging
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import Optional

import pandas as pd
from pydantic import ValidationError

from payback_solar.config import settings
from payback_solar.constantes import CUSTO_DISPONIBILIDADE
from payback_solar.erros import EntradaInvalida, LacunaDeDados, traduzir_erro_validacao
from payback_solar.escalonamento_fio_b import ESCALONAMENTO_PADRAO
from payback_solar.formatacao import parse_valor_br
from payback_solar.models import (
    ConfigRegimeTarifario,
    ConfigTributaria,
    DadosConcessionaria,
    EscalonamentoFioB,
    FaixaFioB,
    TipoLigacao,
)

logger = logging.getLogger(__name__)

VALORES_SIM = {"sim", "s", "true", "1", "x"}


def _ler_csv(caminho: Path, colunas: list[str]) -> pd.DataFrame:
    if not caminho.exists():
        raise LacunaDeDados(f"Arquivo de dados não encontrado: {caminho}")
    df = pd.read_csv(caminho, sep=";", dtype=str, encoding="utf-8").fillna("")
    faltantes = [c for c in colunas if c not in df.columns]
    if faltantes:
        raise LacunaDeDados(f"{caminho.name}: colunas ausentes {', '.join(faltantes)}")
    if df.empty:
        raise LacunaDeDados(f"{caminho.name}: nenhum registro")
    return df


def carregar_escalonamento_fio_b(caminho: str | Path | None = None) -> EscalonamentoFioB:
    """Load the Fio B phase-in table.

    Read:  sep=';', BR decimals ('45,00')
    Columns: ano, percentual_nao_compensado
    Raises LacunaDeDados when the file is missing or empty and
    EntradaInvalida when the table ramps down.
    """
    caminho = Path(caminho or settings.caminho_escalonamento_fio_b)
    df = _ler_csv(caminho, ["ano", "percentual_nao_compensado"])

    df["ano"] = df["ano"].astype(int)
    df["percentual_nao_compensado"] = df["percentual_nao_compensado"].apply(parse_valor_br)
    df = df.sort_values("ano")

    try:
        return EscalonamentoFioB(
            faixas=[
                FaixaFioB(ano=int(r.ano), percentual=float(r.percentual_nao_compensado))
                for r in df.itertuples(index=False)
            ]
        )
    except ValidationError as e:
        raise EntradaInvalida(f"{caminho.name}: {traduzir_erro_validacao(e)}") from e


def carregar_config_tributaria(caminho: str | Path | None = None) -> pd.DataFrame:
    """Load the per-state ICMS / SCEE exemption table (one row per UF).

    Convert:
        aliquota_icms, percentual_isencao → float via parse_valor_br
        possui_isencao_scee ('sim'/'não') → bool

    Each call gets its own copy of the cached table.
    """
    return _carregar_config_tributaria(Path(caminho or settings.caminho_config_tributaria)).copy()


@lru_cache(maxsize=4)
def _carregar_config_tributaria(caminho: Path) -> pd.DataFrame:
    df = _ler_csv(caminho, ["estado", "aliquota_icms", "possui_isencao_scee", "percentual_isencao"])

    df["estado"] = df["estado"].str.strip().str.upper()
    df["aliquota_icms"] = df["aliquota_icms"].apply(parse_valor_br)
    df["percentual_isencao"] = df["percentual_isencao"].apply(parse_valor_br)
    df["possui_isencao_scee"] = df["possui_isencao_scee"].str.strip().str.lower().isin(VALORES_SIM)
    if "observacoes" not in df.columns:
        df["observacoes"] = ""

    return df.reset_index(drop=True)


def listar_ufs(df: pd.DataFrame) -> list[str]:
    """Sorted UFs with tax configuration."""
    return sorted(df["estado"].unique().tolist())


def obter_config_tributaria(df: pd.DataFrame, uf: str) -> ConfigTributaria:
    uf = (uf or "").strip().upper()
    linhas = df[df["estado"] == uf]
    if linhas.empty:
        raise LacunaDeDados(f"Configuração tributária não encontrada para UF '{uf}'")

    r = linhas.iloc[0]
    return ConfigTributaria(
        uf=uf,
        aliquota_icms=float(r["aliquota_icms"]),
        possui_isencao_scee=bool(r["possui_isencao_scee"]),
        percentual_isencao=float(r["percentual_isencao"]),
        observacoes=str(r["observacoes"]),
    )


def custo_disponibilidade(tipo_ligacao: TipoLigacao, override: Optional[float] = None) -> float:
    """Minimum monthly bill (R$) for the connection type; a positive override wins."""
    if override is not None and override > 0:
        return override
    try:
        return CUSTO_DISPONIBILIDADE[tipo_ligacao]
    except KeyError:
        raise EntradaInvalida(
            f"Tipo de ligação inválido: '{tipo_ligacao}'. "
            f"Valores aceitos: {', '.join(CUSTO_DISPONIBILIDADE.keys())}"
        ) from None


def montar_config_regime(
    uf: str,
    tipo_ligacao: TipoLigacao = "monofasico",
    *,
    concessionaria: Optional[DadosConcessionaria] = None,
    df_tributaria: Optional[pd.DataFrame] = None,
    escalonamento: Optional[EscalonamentoFioB] = None,
    ano: Optional[int] = None,
    taxas_fixas_mensais: Optional[float] = None,
) -> ConfigRegimeTarifario:
    """Resolve the tariff regime for one customer.

    ICMS precedence: distributor overrides > state table > defaults.
    Missing regional data never fails: the defaults are used and the
    result is marked origem_tributaria='padrao' so the engine alerts.
    """
    if concessionaria is not None and concessionaria.uf:
        uf = concessionaria.uf
    uf = (uf or "").strip().upper()

    try:
        df = df_tributaria if df_tributaria is not None else carregar_config_tributaria()
        estado = obter_config_tributaria(df, uf)
        origem = "estado"
    except LacunaDeDados as e:
        logger.warning("%s. Usando ICMS padrão de %.1f%%", e, settings.icms_padrao, extra={"uf": uf})
        estado = ConfigTributaria(uf=uf, aliquota_icms=settings.icms_padrao)
        origem = "padrao"

    icms = estado.aliquota_icms
    possui_isencao = estado.possui_isencao_scee
    percentual_isencao = estado.percentual_isencao

    # Concessionária com ICMS próprio: campos nulos herdam do estado
    if concessionaria is not None and (
        concessionaria.aliquota_icms is not None or concessionaria.possui_isencao_scee is not None
    ):
        if concessionaria.aliquota_icms is not None:
            icms = concessionaria.aliquota_icms
        if concessionaria.possui_isencao_scee is not None:
            possui_isencao = concessionaria.possui_isencao_scee
        if concessionaria.percentual_isencao is not None:
            percentual_isencao = concessionaria.percentual_isencao
        origem = "concessionaria"

    escalonamento = escalonamento or ESCALONAMENTO_PADRAO
    ano = ano or date.today().year
    taxas = settings.taxas_fixas_mensais if taxas_fixas_mensais is None else taxas_fixas_mensais
    override_disponibilidade = concessionaria.custo_disponibilidade if concessionaria else None

    return ConfigRegimeTarifario(
        icms_pct=icms,
        percentual_fio_b_atual=escalonamento.percentual_para_ano(ano),
        encargos_fixos_mensais=custo_disponibilidade(tipo_ligacao, override_disponibilidade) + taxas,
        isencao_scee_disponivel=possui_isencao,
        percentual_isencao_scee=percentual_isencao,
        tarifa_fio_b_kwh=concessionaria.tarifa_fio_b_kwh if concessionaria else None,
        origem_tributaria=origem,
        uf=uf or None,
    )
