from pathlib import Path

from pydantic_settings import BaseSettings

DIRETORIO_DADOS = Path(__file__).parent / "dados"


class Settings(BaseSettings):
    model_config = {"env_prefix": "PAYBACK_", "case_sensitive": False}

    # Premissas técnicas
    fator_geracao_kwh_kwp: float = 120.0  # kWh/kWp/mês, média Brasil
    tarifa_fio_b_padrao: float = 0.40     # R$/kWh
    icms_padrao: float = 18.0
    taxas_fixas_mensais: float = 0.0

    # TIR (Newton-Raphson)
    tir_estimativa_inicial: float = 0.10
    tir_max_iteracoes: int = 50
    tir_tolerancia: float = 1.0
    tir_faixa_min: float = -0.99
    tir_faixa_max: float = 10.0

    # Alertas
    limiar_subdimensionamento: float = 0.5

    # Dados regulatórios
    caminho_escalonamento_fio_b: Path = DIRETORIO_DADOS / "fio_b_escalonamento.csv"
    caminho_config_tributaria: Path = DIRETORIO_DADOS / "config_tributaria_estados.csv"

    log_json: bool = False


settings = Settings()
