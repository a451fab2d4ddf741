from io import BytesIO

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from payback_solar.formatacao import formatar_moeda, formatar_payback, formatar_percentual
from payback_solar.models import ResultadoPayback, ResumoCenario

PAGE_W, PAGE_H = A4
VERDE_ESCURO = HexColor("#148c73")
VERDE_CLARO = HexColor("#80c739")
LARANJA = HexColor("#f58634")
CINZA_CLARO = HexColor("#f0f2f6")
BRANCO = HexColor("#FFFFFF")
PRETO = HexColor("#262730")
MARGEM = 40


def gerar_relatorio(nome_cliente: str, resultado: ResultadoPayback,
                    grafico_png: bytes = b"") -> bytes:
    """Returns PDF bytes.

    Page 1: Executive Summary (both scenarios + alerts)
    Page 2: Cumulative savings chart
    Page 3: Annual projection table
    """
    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)

    _pagina_resumo(c, nome_cliente, resultado)
    c.showPage()

    _pagina_grafico(c, grafico_png)
    c.showPage()

    _pagina_tabela(c, resultado)
    c.showPage()

    c.save()
    return buf.getvalue()


def _cabecalho(c: canvas.Canvas, titulo: str, altura: int = 60):
    c.setFillColor(VERDE_ESCURO)
    c.rect(0, PAGE_H - altura, PAGE_W, altura, fill=1, stroke=0)
    c.setFillColor(BRANCO)
    c.setFont("Helvetica-Bold", 18)
    c.drawString(MARGEM, PAGE_H - 40, titulo)


def _pagina_resumo(c: canvas.Canvas, nome_cliente: str, resultado: ResultadoPayback):
    """Page 1: headline figures side by side, then alerts."""
    c.setFillColor(VERDE_ESCURO)
    c.rect(0, PAGE_H - 80, PAGE_W, 80, fill=1, stroke=0)

    c.setFillColor(BRANCO)
    c.setFont("Helvetica-Bold", 22)
    c.drawString(MARGEM, PAGE_H - 50, "Análise de Payback Solar")
    c.setFont("Helvetica", 11)
    c.drawString(MARGEM, PAGE_H - 70, "Projeção de economia com escalonamento do Fio B (Lei 14.300)")

    y = PAGE_H - 120
    c.setFillColor(PRETO)
    c.setFont("Helvetica-Bold", 14)
    if nome_cliente:
        c.drawString(MARGEM, y, f"Cliente: {nome_cliente}")
        y -= 25

    config = resultado.config_usada
    c.setFont("Helvetica", 11)
    uf = f"{config.uf} · " if config.uf else ""
    c.drawString(
        MARGEM, y,
        f"{uf}ICMS {formatar_percentual(config.icms_pct / 100)} · "
        f"Fio B atual {formatar_percentual(resultado.conservador.percentual_fio_b / 100)}",
    )
    y -= 50

    largura = (PAGE_W - 2 * MARGEM) / 2
    _bloco_cenario(c, resultado.conservador, MARGEM + largura / 2, y, VERDE_ESCURO)
    _bloco_cenario(c, resultado.otimista, MARGEM + largura * 1.5, y, VERDE_CLARO)
    y -= 230

    if resultado.alertas:
        c.setFillColor(LARANJA)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(MARGEM, y, "Alertas")
        y -= 18
        c.setFillColor(PRETO)
        c.setFont("Helvetica", 9)
        for alerta in resultado.alertas:
            for linha in simpleSplit(f"• {alerta}", "Helvetica", 9, PAGE_W - 2 * MARGEM):
                if y < 40:
                    break
                c.drawString(MARGEM, y, linha)
                y -= 12
            y -= 3

    _rodape(c)


def _bloco_cenario(c: canvas.Canvas, resumo: ResumoCenario, x: float, y: float, cor):
    c.setFillColor(cor)
    c.setFont("Helvetica-Bold", 16)
    c.drawCentredString(x, y, resumo.rotulo)
    y -= 40

    c.setFont("Helvetica-Bold", 26)
    c.drawCentredString(x, y, formatar_payback(resumo.payback_anos))
    y -= 18
    c.setFillColor(PRETO)
    c.setFont("Helvetica", 11)
    c.drawCentredString(x, y, "Payback")
    y -= 40

    linhas = [
        ("Economia mensal (ano 1)", formatar_moeda(resumo.economia_liquida)),
        ("Economia no horizonte", formatar_moeda(resumo.economia_acumulada)),
        ("ROI", formatar_percentual(resumo.roi_pct / 100)),
        ("TIR", _texto_tir(resumo)),
    ]
    for rotulo, valor in linhas:
        c.setFont("Helvetica-Bold", 13)
        c.drawCentredString(x, y, valor)
        y -= 14
        c.setFont("Helvetica", 9)
        c.drawCentredString(x, y, rotulo)
        y -= 22


def _texto_tir(resumo: ResumoCenario) -> str:
    if resumo.tir_anual_pct is None:
        return "n/d"
    texto = f"{formatar_percentual(resumo.tir_anual_pct / 100)} a.a."
    return texto if resumo.tir_confiavel else f"{texto} (estimativa)"


def _pagina_grafico(c: canvas.Canvas, grafico_png: bytes):
    """Page 2: Full chart image."""
    _cabecalho(c, "Economia Acumulada")

    if grafico_png and len(grafico_png) > 0:
        img_buf = BytesIO(grafico_png)
        try:
            img = ImageReader(img_buf)
            img_w = 160 * mm
            img_h = 100 * mm
            x = (PAGE_W - img_w) / 2
            y = (PAGE_H - 60 - img_h) / 2
            c.drawImage(img, x, y, width=img_w, height=img_h,
                        preserveAspectRatio=True, anchor="c")
        except (OSError, ValueError):
            _sem_grafico(c)
    else:
        _sem_grafico(c)

    _rodape(c)


def _sem_grafico(c: canvas.Canvas):
    c.setFillColor(PRETO)
    c.setFont("Helvetica", 12)
    c.drawCentredString(PAGE_W / 2, PAGE_H / 2, "Gráfico não disponível")


def _pagina_tabela(c: canvas.Canvas, resultado: ResultadoPayback):
    """Page 3: year-by-year Fio B and savings for both scenarios."""
    _cabecalho(c, "Projeção Anual")

    headers = ["Ano", "Fio B", "Custo Fio B", "Conservador", "Otimista", "Acumulado"]
    data = [headers]

    acumulado = 0.0
    for i in resultado.fio_b_impacto_anual:
        acumulado += i.economia_liquida
        data.append([
            str(i.ano_calendario),
            formatar_percentual(i.percentual / 100),
            formatar_moeda(i.custo_fio_b),
            formatar_moeda(i.economia_liquida),
            formatar_moeda(i.economia_liquida_otimista),
            formatar_moeda(acumulado),
        ])

    data.append([
        "TOTAL",
        "",
        formatar_moeda(sum(i.custo_fio_b for i in resultado.fio_b_impacto_anual)),
        formatar_moeda(resultado.conservador.economia_acumulada),
        formatar_moeda(resultado.otimista.economia_acumulada),
        "",
    ])

    col_widths = [50, 55, 90, 95, 95, 95]
    table = Table(data, colWidths=col_widths)

    style = TableStyle([
        # Header row
        ("BACKGROUND", (0, 0), (-1, 0), VERDE_ESCURO),
        ("TEXTCOLOR", (0, 0), (-1, 0), BRANCO),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 9),
        ("ALIGN", (0, 0), (-1, 0), "CENTER"),
        # Data rows
        ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
        ("FONTSIZE", (0, 1), (-1, -1), 8),
        ("ALIGN", (0, 1), (1, -1), "CENTER"),
        ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
        # Totals row (last)
        ("BACKGROUND", (0, -1), (-1, -1), CINZA_CLARO),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -2), [BRANCO, CINZA_CLARO]),
        ("GRID", (0, 0), (-1, -1), 0.5, HexColor("#cccccc")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ])
    table.setStyle(style)

    table_w, table_h = table.wrap(0, 0)
    x = (PAGE_W - table_w) / 2
    y = PAGE_H - 80 - table_h
    table.drawOn(c, x, y)

    _rodape(c)


def _rodape(c: canvas.Canvas):
    """Draw footer on current page."""
    c.setFillColor(HexColor("#999999"))
    c.setFont("Helvetica", 8)
    c.drawCentredString(PAGE_W / 2, 20,
                        "Payback Solar · Estimativa sujeita a revisão tarifária · "
                        "Documento gerado automaticamente")
