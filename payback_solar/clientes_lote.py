import logging
from io import BytesIO
from typing import Optional

import pandas as pd
from pydantic import ValidationError

from payback_solar.constantes import CUSTO_DISPONIBILIDADE
from payback_solar.dados_tarifarios import carregar_escalonamento_fio_b, montar_config_regime
from payback_solar.erros import EntradaInvalida, LacunaDeDados, traduzir_erro_validacao
from payback_solar.models import (
    ConfigRegimeTarifario,
    DadosConcessionaria,
    EntradaCalculo,
    EscalonamentoFioB,
)
from payback_solar.motor_payback import calcular_payback

logger = logging.getLogger(__name__)

TEMPLATE_COLUMNS = [
    "Nome",
    "UF",
    "Tipo Ligação",
    "Regime",
    "Consumo (kWh/mês)",
    "Tarifa (R$/kWh)",
    "Potência (kWp)",
    "Investimento (R$)",
    "Reajuste Tarifa (%)",
    "Degradação Painel (%)",
    "Tarifa Fio B (R$/kWh)",
    "Ano Base",
]

EXEMPLO = {
    "Nome": "Residência Exemplo",
    "UF": "MG",
    "Tipo Ligação": "bifasico",
    "Regime": "gd2",
    "Consumo (kWh/mês)": 400,
    "Tarifa (R$/kWh)": 0.95,
    "Potência (kWp)": 3.2,
    "Investimento (R$)": 18000,
    "Reajuste Tarifa (%)": 5.0,
    "Degradação Painel (%)": 0.8,
    "Tarifa Fio B (R$/kWh)": 0.40,
    "Ano Base": 2025,
}


def gerar_template_excel() -> bytes:
    """Template with headers + 1 example row. Returns .xlsx bytes."""
    buf = BytesIO()
    df = pd.DataFrame([EXEMPLO], columns=TEMPLATE_COLUMNS)
    with pd.ExcelWriter(buf, engine="xlsxwriter") as writer:
        df.to_excel(writer, index=False, sheet_name="Unidades")
    return buf.getvalue()


def _opcional(row: pd.Series, coluna: str) -> Optional[float]:
    valor = row.get(coluna)
    if valor is None or pd.isna(valor) or valor == "":
        return None
    return float(valor)


def _build_params_from_row(
    row: pd.Series,
    df_tributaria: Optional[pd.DataFrame],
    escalonamento: Optional[EscalonamentoFioB],
) -> tuple[EntradaCalculo, ConfigRegimeTarifario]:
    """Build engine input and tariff regime from a spreadsheet row.

    Raises ValidationError / EntradaInvalida on invalid data.
    """
    tipo_ligacao = str(row.get("Tipo Ligação", "monofasico")).strip().lower()
    if tipo_ligacao not in CUSTO_DISPONIBILIDADE:
        raise EntradaInvalida(
            f"Tipo de ligação inválido: '{tipo_ligacao}'. "
            f"Valores aceitos: {', '.join(CUSTO_DISPONIBILIDADE.keys())}"
        )

    ano_base = _opcional(row, "Ano Base")
    reajuste = _opcional(row, "Reajuste Tarifa (%)")
    degradacao = _opcional(row, "Degradação Painel (%)")

    entrada = EntradaCalculo(
        consumo_mensal_kwh=float(row["Consumo (kWh/mês)"]),
        tarifa_kwh=float(row["Tarifa (R$/kWh)"]),
        potencia_instalada_kwp=float(row["Potência (kWp)"]),
        investimento_total=float(row["Investimento (R$)"]),
        reajuste_anual_tarifa_pct=5.0 if reajuste is None else reajuste,
        degradacao_anual_painel_pct=0.8 if degradacao is None else degradacao,
        regime=str(row.get("Regime", "gd2")).strip().lower(),
        ano_base=int(ano_base) if ano_base is not None else None,
    )

    tarifa_fio_b = _opcional(row, "Tarifa Fio B (R$/kWh)")
    concessionaria = DadosConcessionaria(tarifa_fio_b_kwh=tarifa_fio_b) if tarifa_fio_b else None

    config = montar_config_regime(
        str(row.get("UF", "")),
        tipo_ligacao,
        concessionaria=concessionaria,
        df_tributaria=df_tributaria,
        escalonamento=escalonamento,
        ano=entrada.ano_base,
    )
    return entrada, config


def processar_lote(
    arquivo: bytes,
    df_tributaria: Optional[pd.DataFrame] = None,
    escalonamento: Optional[EscalonamentoFioB] = None,
    progress_callback=None,
) -> dict:
    """Process each row independently: build params -> resolve regime -> calculate.

    Args:
        arquivo: Excel file bytes.
        df_tributaria: Pre-loaded state tax table (defaults to the packaged CSV).
        escalonamento: Fio B schedule (defaults to the packaged CSV).
        progress_callback: Optional callable(progress_float, status_text).

    Returns:
        {'unidades': [...], 'consolidado': {...}}
        Each unit has keys: Nome, UF, Economia Mensal, Payback Conservador,
        Payback Otimista, Economia no Horizonte, _resultado. On error: _erro
        replaces _resultado.
    """
    try:
        df_upload = pd.read_excel(BytesIO(arquivo), sheet_name="Unidades")
    except ValueError:
        df_upload = pd.read_excel(BytesIO(arquivo))

    if escalonamento is None:
        try:
            escalonamento = carregar_escalonamento_fio_b()
        except LacunaDeDados as e:
            logger.warning("%s. Usando escalonamento padrão da Lei 14.300.", e)

    total = len(df_upload)
    if total == 0:
        return {"unidades": [], "consolidado": _consolidar([])}

    resultados = []

    for idx, row in df_upload.iterrows():
        nome = row.get("Nome", f"Unidade {idx + 1}")
        if progress_callback:
            progress_callback((idx + 1) / total, f"Processando unidade {idx + 1}/{total}: {nome}")

        base = {"Nome": nome, "UF": str(row.get("UF", ""))}
        try:
            entrada, config = _build_params_from_row(row, df_tributaria, escalonamento)
            res = calcular_payback(entrada, config, escalonamento)
        except ValidationError as e:
            erro = traduzir_erro_validacao(e)
        except (EntradaInvalida, KeyError, ValueError, TypeError) as e:
            erro = str(e)
        else:
            resultados.append({
                **base,
                "Economia Mensal": res.conservador.economia_liquida,
                "Payback Conservador": res.conservador.payback_anos,
                "Payback Otimista": res.otimista.payback_anos,
                "Economia no Horizonte": res.conservador.economia_acumulada,
                "Investimento": entrada.investimento_total,
                "_resultado": res,
            })
            continue

        logger.warning("Unidade %s ignorada: %s", nome, erro, extra={"unidade": str(nome)})
        resultados.append({
            **base,
            "Economia Mensal": 0,
            "Payback Conservador": 0,
            "Payback Otimista": 0,
            "Economia no Horizonte": 0,
            "Investimento": 0,
            "_erro": erro,
        })

    return {"unidades": resultados, "consolidado": _consolidar(resultados)}


def _consolidar(resultados: list[dict]) -> dict:
    validos = [r for r in resultados if "_resultado" in r]
    return {
        "total_unidades": len(resultados),
        "unidades_com_erro": len(resultados) - len(validos),
        "total_investimento": sum(r["Investimento"] for r in validos),
        "total_economia_mensal": sum(r["Economia Mensal"] for r in validos),
        "total_economia_horizonte": sum(r["Economia no Horizonte"] for r in validos),
    }
