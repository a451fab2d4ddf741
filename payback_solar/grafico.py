from itertools import accumulate

import plotly.graph_objects as go

from payback_solar.formatacao import formatar_moeda, formatar_payback
from payback_solar.models import ImpactoFioBAno, ResultadoPayback

VERDE_ESCURO = "#148c73"
VERDE_CLARO = "#80c739"
LARANJA = "#f58634"
CINZA = "#7f7f7f"


def criar_grafico_economia_acumulada(resultado: ResultadoPayback, investimento: float) -> go.Figure:
    """Lines: cumulative net savings per scenario, dashed investment level.

    Payback markers are drawn only where payback was reached.
    """
    fig = go.Figure()

    for resumo, cor in ((resultado.conservador, VERDE_ESCURO), (resultado.otimista, VERDE_CLARO)):
        anos = [r.ano for r in resumo.serie_anual]
        acumulado = list(accumulate(r.economia_liquida for r in resumo.serie_anual))
        fig.add_trace(go.Scatter(
            name=resumo.rotulo,
            x=anos,
            y=acumulado,
            mode="lines+markers",
            line=dict(color=cor, width=2),
            marker=dict(size=4),
            hovertemplate=f"{resumo.rotulo} - Ano %{{x}}: %{{customdata}}<extra></extra>",
            customdata=[formatar_moeda(v) for v in acumulado],
        ))
        if resumo.payback_atingido:
            fig.add_vline(
                x=resumo.payback_anos,
                line=dict(color=cor, dash="dot", width=1),
                annotation_text=f"Payback {resumo.rotulo}: {formatar_payback(resumo.payback_anos)}",
                annotation_position="top left",
            )

    fig.add_hline(
        y=investimento,
        line=dict(color=LARANJA, dash="dash", width=2),
        annotation_text=f"Investimento {formatar_moeda(investimento)}",
        annotation_position="bottom right",
    )

    fig.update_layout(
        title="Economia Acumulada",
        xaxis_title="Ano",
        yaxis_title="R$",
        yaxis_tickprefix="R$ ",
        yaxis_tickformat=",.0f",
        yaxis_separatethousands=True,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        plot_bgcolor="white",
        height=450,
    )

    return fig


def criar_grafico_impacto_fio_b(impacto: list[ImpactoFioBAno]) -> go.Figure:
    """Bars: annual Fio B cost; lines: net savings of both scenarios; % on a second axis."""
    anos = [i.ano_calendario for i in impacto]
    custos = [i.custo_fio_b for i in impacto]

    fig = go.Figure()

    fig.add_trace(go.Bar(
        name="Custo Fio B",
        x=anos,
        y=custos,
        marker_color=LARANJA,
        hovertemplate="Custo Fio B: %{customdata}<extra></extra>",
        customdata=[formatar_moeda(v) for v in custos],
    ))

    for nome, valores, cor in (
        ("Economia Conservador", [i.economia_liquida for i in impacto], VERDE_ESCURO),
        ("Economia Otimista", [i.economia_liquida_otimista for i in impacto], VERDE_CLARO),
    ):
        fig.add_trace(go.Scatter(
            name=nome,
            x=anos,
            y=valores,
            mode="lines+markers",
            line=dict(color=cor, width=2),
            hovertemplate=f"{nome}: %{{customdata}}<extra></extra>",
            customdata=[formatar_moeda(v) for v in valores],
        ))

    fig.add_trace(go.Scatter(
        name="% Fio B",
        x=anos,
        y=[i.percentual for i in impacto],
        mode="lines",
        line=dict(color=CINZA, dash="dot"),
        yaxis="y2",
        hovertemplate="Fio B: %{y:.0f}%<extra></extra>",
    ))

    fig.update_layout(
        title="Impacto do Fio B ao Longo dos Anos",
        xaxis_title="Ano",
        yaxis=dict(title="R$", tickprefix="R$ ", tickformat=",.0f"),
        yaxis2=dict(title="Fio B (%)", overlaying="y", side="right", range=[0, 100], ticksuffix="%"),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        plot_bgcolor="white",
        height=450,
    )

    return fig


def criar_grafico_comparativo_cenarios(resultado: ResultadoPayback) -> go.Figure:
    """Grouped bars comparing conservative and optimistic headline figures."""
    categorias = ["Economia Mensal (ano 1)", "Custo Fio B Mensal", "Economia no Horizonte", "VPL"]

    fig = go.Figure()

    for resumo, cor in ((resultado.conservador, VERDE_ESCURO), (resultado.otimista, VERDE_CLARO)):
        valores = [resumo.economia_liquida, resumo.custo_fio_b, resumo.economia_acumulada, resumo.vpl]
        fig.add_trace(go.Bar(
            name=resumo.rotulo,
            x=categorias,
            y=valores,
            marker_color=cor,
            text=[formatar_moeda(v) for v in valores],
            textposition="outside",
            hovertemplate="%{x}: %{customdata}<extra></extra>",
            customdata=[formatar_moeda(v) for v in valores],
        ))

    fig.update_layout(
        barmode="group",
        title="Comparativo de Cenários",
        yaxis_title="R$",
        yaxis_tickprefix="R$ ",
        yaxis_tickformat=",.0f",
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
        plot_bgcolor="white",
        height=500,
    )

    return fig
