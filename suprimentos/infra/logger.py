# suprimentos/infra/logger.py
"""
Sistema de logging para as operações de suprimentos.

Este módulo configura e fornece loggers para registrar as operações
críticas do sistema: recebimento e baixa de lotes, mudanças de status
de ordens de compra, lançamentos contábeis e acesso ao banco de dados.
"""

import logging
from pathlib import Path
from typing import Dict, Any, Optional


# Flag global para habilitar/desabilitar logging
ENABLE_LOGGING = False
# Flag global para habilitar/desabilitar prints/output
ENABLE_OUTPUT = False

def print_system(*args, **kwargs):
    """Print controlado pelo ENABLE_OUTPUT."""
    if ENABLE_OUTPUT:
        print(*args, **kwargs)

# Configuração base dos loggers
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def setup_logger(name: str, log_file: str, level: int = logging.INFO) -> logging.Logger:
    """
    Configura um logger com saída apenas em arquivo.

    Args:
        name: Nome do logger
        log_file: Caminho do arquivo de log
        level: Nível de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Logger configurado
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    # não propaga para o root (nada no console)
    logger.propagate = False

    while logger.handlers:
        logger.removeHandler(logger.handlers[0])

    file_handler = logging.FileHandler(log_file, encoding='utf-8', delay=True)
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger

# Diretório base para logs (na pasta do pacote)
BASE_DIR = Path(__file__).parent.parent
LOGS_DIR = BASE_DIR / "logs"

LOG_FILES = {
    "transactions": LOGS_DIR / "transactions.log",
    "lotes": LOGS_DIR / "lotes.log",
    "ordens": LOGS_DIR / "ordens.log",
    "contabil": LOGS_DIR / "contabil.log",
    "database": LOGS_DIR / "database.log",
    "system": LOGS_DIR / "system.log",
}

transaction_logger = setup_logger('suprimentos.transactions', str(LOG_FILES["transactions"]))
lote_logger = setup_logger('suprimentos.lotes', str(LOG_FILES["lotes"]))
ordem_logger = setup_logger('suprimentos.ordens', str(LOG_FILES["ordens"]))
contabil_logger = setup_logger('suprimentos.contabil', str(LOG_FILES["contabil"]))
database_logger = setup_logger('suprimentos.database', str(LOG_FILES["database"]))
system_logger = setup_logger('suprimentos.system', str(LOG_FILES["system"]))


def _ativo() -> bool:
    return ENABLE_LOGGING or ENABLE_OUTPUT


def log_transaction(operation: str, data: Dict[str, Any], result: Optional[Any] = None, error: Optional[str] = None) -> None:
    """
    Registra uma transação completa (sucesso ou falha).

    Args:
        operation: Nome da operação (registrar_lote, excluir_ordem, ...)
        data: Dados de entrada da operação
        result: Resultado da operação (opcional)
        error: Mensagem de erro (opcional)
    """
    if not _ativo():
        return
    if error:
        transaction_logger.error(f"TRANSACTION_FAILED: {operation} - {error} - Data: {data}")
    else:
        transaction_logger.info(f"TRANSACTION_SUCCESS: {operation} - Result: {result} - Data: {data}")

def log_lote(action: str, id_lote: Optional[int], quantidade: Optional[int] = None, **kwargs) -> None:
    """
    Log específico para operações com lotes.

    Args:
        action: Ação realizada (insert, ajuste, baixa, delete)
        id_lote: ID do lote (None antes da inserção)
        quantidade: Quantidade envolvida
        **kwargs: Dados adicionais
    """
    if not _ativo():
        return
    log_data = {"action": action, "id_lote": id_lote, "quantidade": quantidade, **kwargs}
    lote_logger.info(f"LOTE_{action.upper()}: {log_data}")

def log_ordem(action: str, id_ordem: Optional[int], status: Optional[str] = None, **kwargs) -> None:
    """Log específico para ordens de compra (criação, status, exclusão)."""
    if not _ativo():
        return
    log_data = {"action": action, "id_ordem": id_ordem, "status": status, **kwargs}
    ordem_logger.info(f"ORDEM_{action.upper()}: {log_data}")

def log_movimento(action: str, numero_lancamento: Optional[int], id_plano_conta: Optional[int] = None, **kwargs) -> None:
    """Log específico para lançamentos contábeis."""
    if not _ativo():
        return
    log_data = {
        "action": action,
        "numero_lancamento": numero_lancamento,
        "id_plano_conta": id_plano_conta,
        **kwargs,
    }
    contabil_logger.info(f"MOVIMENTO_{action.upper()}: {log_data}")

def log_database_operation(table: str, operation: str, affected_rows: int = 0, **kwargs) -> None:
    """
    Log específico para operações no banco de dados.

    Args:
        table: Nome da tabela
        operation: Operação SQL (INSERT, UPDATE, DELETE, SELECT)
        affected_rows: Número de linhas afetadas
        **kwargs: Dados adicionais
    """
    if not _ativo():
        return
    log_data = {"table": table, "operation": operation, "affected_rows": affected_rows, **kwargs}
    database_logger.info(f"DB_{operation}: {log_data}")

def log_system_event(event: str, details: Dict[str, Any] = None, level: str = "info") -> None:
    """
    Log para eventos do sistema.

    Args:
        event: Descrição do evento
        details: Detalhes adicionais (opcional)
        level: Nível do log (info, warning, error)
    """
    if not _ativo():
        return
    log_data = {"event": event, "details": details or {}}
    log_method = getattr(system_logger, level.lower(), system_logger.info)
    log_method(f"SYSTEM_EVENT: {event} - {log_data}")

def log_file_operation(operation: str, file_path: str, rows_processed: int = 0, **kwargs) -> None:
    """Log para importação/exportação de planilhas."""
    if not _ativo():
        return
    log_data = {"operation": operation, "file_path": file_path, "rows_processed": rows_processed, **kwargs}
    system_logger.info(f"FILE_{operation.upper()}: {log_data}")

def get_log_summary(log_type: str = "transactions", lines: int = 100) -> Optional[str]:
    """
    Obtém as últimas linhas de um log.

    Args:
        log_type: transactions, lotes, ordens, contabil, database ou system
        lines: Número de linhas a retornar

    Returns:
        Conteúdo do log como string (None com o logging desligado)
    """
    if not _ativo():
        return None

    log_file = LOG_FILES.get(log_type)
    if not log_file or not log_file.exists():
        return f"Log {log_type} não encontrado."

    try:
        with open(log_file, 'r', encoding='utf-8') as f:
            all_lines = f.readlines()
    except OSError as e:
        return f"Erro ao ler log {log_type}: {e}"
    return ''.join(all_lines[-lines:])
