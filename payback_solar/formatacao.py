import math

from payback_solar.constantes import PAYBACK_NAO_ATINGIDO


def formatar_moeda(valor: float) -> str:
    """1234.56 → 'R$ 1.234,56'"""
    if valor < 0:
        return f"-R$ {_formatar_numero_br(abs(valor))}"
    return f"R$ {_formatar_numero_br(valor)}"


def formatar_percentual(valor: float) -> str:
    """0.2534 → '25,34%'"""
    pct = valor * 100
    if pct < 0:
        return f"-{_formatar_numero_br(abs(pct))}%"
    return f"{_formatar_numero_br(pct)}%"


def formatar_kwh(valor: float) -> str:
    """4608.4 → '4.608 kWh'"""
    return f"{valor:,.0f}".replace(",", ".") + " kWh"


def formatar_payback(anos: float) -> str:
    """6.25 → '6 anos e 3 meses' | 0 → 'Não atingido'"""
    if anos <= PAYBACK_NAO_ATINGIDO or not math.isfinite(anos):
        return "Não atingido"
    meses_totais = math.ceil(round(anos * 12, 6))
    inteiro, meses = divmod(meses_totais, 12)
    partes = []
    if inteiro:
        partes.append(f"{inteiro} ano" if inteiro == 1 else f"{inteiro} anos")
    if meses:
        partes.append(f"{meses} mês" if meses == 1 else f"{meses} meses")
    return " e ".join(partes)


def parse_valor_br(valor_str: str) -> float:
    """'22,81' → 22.81 | ',00' → 0.0 | '' → 0.0"""
    if not valor_str or not isinstance(valor_str, str):
        return 0.0
    valor_str = valor_str.strip()
    if not valor_str:
        return 0.0
    valor_str = valor_str.replace('.', '').replace(',', '.')
    try:
        return float(valor_str)
    except ValueError:
        return 0.0


def _formatar_numero_br(valor: float) -> str:
    """1234.56 → '1.234,56'"""
    return f"{valor:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
