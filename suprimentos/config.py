# suprimentos/config.py
"""
Configurações globais e valores padrão do sistema de suprimentos.
"""

import os
from dataclasses import dataclass


# Caminho padrão do banco de dados SQLite (SUPRIMENTOS_DB sobrescreve)
DB_PATH = os.environ.get("SUPRIMENTOS_DB") or os.path.join(os.getcwd(), "suprimentos.db")


@dataclass
class DefaultConfig:
    """Valores padrão para parâmetros do sistema."""
    janela_vencimento_dias: int = 30  # Lote "próximo do vencimento" até hoje + N dias
    transicoes_estritas: bool = False  # Aplica o grafo completo de transições de status


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
