from pydantic import ValidationError


class ErroPayback(Exception):
    """Base for every error raised by the payback engine."""


class EntradaInvalida(ErroPayback, ValueError):
    """Input violates a stated invariant. Nothing is computed."""


class InstabilidadeNumerica(ErroPayback, ArithmeticError):
    """TIR did not converge or landed outside the plausible band.

    Advisory: the engine keeps ``taxa`` as its best estimate and reports
    the problem in ``alertas``.
    """

    def __init__(self, mensagem: str, taxa: float):
        super().__init__(mensagem)
        self.taxa = taxa


class LacunaDeDados(ErroPayback, LookupError):
    """Regional or tariff data is missing; callers fall back to defaults."""


def traduzir_erro_validacao(e: ValidationError) -> str:
    """Convert Pydantic ValidationError to a Portuguese message."""
    mensagens = []
    for err in e.errors():
        campo = " > ".join(str(loc) for loc in err["loc"]) or "entrada"
        tipo = err["type"]
        ctx = err.get("ctx", {})
        if tipo == "greater_than":
            mensagens.append(f"Campo '{campo}': valor deve ser > {ctx.get('gt', 0)}")
        elif tipo == "greater_than_equal":
            mensagens.append(f"Campo '{campo}': valor deve ser >= {ctx.get('ge', 0)}")
        elif tipo == "less_than":
            mensagens.append(f"Campo '{campo}': valor deve ser < {ctx.get('lt', 0)}")
        elif tipo == "less_than_equal":
            mensagens.append(f"Campo '{campo}': valor deve ser <= {ctx.get('le', 0)}")
        elif tipo == "missing":
            mensagens.append(f"Campo '{campo}': obrigatório, mas não foi preenchido")
        else:
            mensagens.append(f"Campo '{campo}': {err['msg']}")
    return "; ".join(mensagens)
