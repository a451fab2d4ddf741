# Lei 14.300/2022: percentual do Fio B não compensado, por ano de conexão
ESCALONAMENTO_LEI_14300 = {
    2023: 15.0,
    2024: 30.0,
    2025: 45.0,
    2026: 60.0,
    2027: 75.0,
    2028: 90.0,
}
ANO_FIM_GD1 = 2045  # direito adquirido GD I (art. 26)

# Custo de disponibilidade (R$/mês) por tipo de ligação
CUSTO_DISPONIBILIDADE = {
    "monofasico": 30.0,
    "bifasico": 50.0,
    "trifasico": 100.0,
}

ROTULOS_CENARIO = {
    "conservador": "Conservador",
    "otimista": "Otimista",
}

PAYBACK_NAO_ATINGIDO = 0.0  # sentinela: payback fora do horizonte
