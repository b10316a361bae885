# suprimentos/infra/migrations.py
"""
Migrações de schema usando PRAGMA user_version.

V1: tabelas base (params, produto, ordem_compra, item_ordem_compra, lote, mov_contabil)
V2: adiciona data de entrega efetiva na ordem de compra

Convenções de armazenamento:
- datas em TEXT ISO (YYYY-MM-DD);
- valores monetários em TEXT (string de Decimal) para não perder precisão.
"""

from __future__ import annotations

from typing import List
from .db import connect
from .logger import log_database_operation


SCHEMA_V1: List[str] = [
    # Parâmetros K/V
    """
    CREATE TABLE IF NOT EXISTS params (
        chave TEXT PRIMARY KEY,
        valor TEXT
    );
    """,
    # Cadastro de produtos
    """
    CREATE TABLE IF NOT EXISTS produto (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        nome TEXT NOT NULL,
        descricao TEXT NOT NULL,
        id_almoxarifado INTEGER,
        id_unidade_medida INTEGER NOT NULL,
        cod_barras TEXT,
        temp_ideal TEXT,
        estoque_max INTEGER,
        estoque_min INTEGER,
        ponto_pedido INTEGER
    );
    """,
    # Ordens de compra
    """
    CREATE TABLE IF NOT EXISTS ordem_compra (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        status TEXT NOT NULL CHECK (status IN ('PEND', 'ANDA', 'CONC')),
        valor TEXT NOT NULL,
        data_prevista TEXT NOT NULL,
        data_ordem TEXT NOT NULL
    );
    """,
    # Itens da ordem de compra
    """
    CREATE TABLE IF NOT EXISTS item_ordem_compra (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        id_ordem_compra INTEGER NOT NULL,
        id_produto INTEGER NOT NULL,
        quantidade INTEGER NOT NULL,
        valor TEXT NOT NULL,
        data_vencimento TEXT,
        FOREIGN KEY (id_ordem_compra) REFERENCES ordem_compra(id) ON DELETE CASCADE,
        FOREIGN KEY (id_produto) REFERENCES produto(id)
    );
    """,
    # Lotes recebidos
    """
    CREATE TABLE IF NOT EXISTS lote (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        id_ordem_compra INTEGER NOT NULL,
        id_produto INTEGER NOT NULL,
        data_fabricacao TEXT,
        data_vencimento TEXT,
        quantidade INTEGER NOT NULL DEFAULT 0 CHECK (quantidade >= 0),
        FOREIGN KEY (id_ordem_compra) REFERENCES ordem_compra(id),
        FOREIGN KEY (id_produto) REFERENCES produto(id)
    );
    """,
    # Movimentações contábeis (valor sempre >= 0; sinal em `tipo`)
    """
    CREATE TABLE IF NOT EXISTS mov_contabil (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        numero_lancamento INTEGER NOT NULL,
        id_plano_conta INTEGER NOT NULL,
        id_ordem_compra INTEGER,
        data_lancamento TEXT,
        tipo TEXT NOT NULL CHECK (tipo IN ('D', 'C')),
        valor TEXT NOT NULL,
        FOREIGN KEY (id_ordem_compra) REFERENCES ordem_compra(id)
    );
    """,
]


def _ensure_column(conn, table: str, column: str, ddl: str) -> None:
    """Adiciona coluna se não existir (SQLite não tem ADD COLUMN IF NOT EXISTS)."""
    cur = conn.execute(f"PRAGMA table_info({table});")
    cols = [r[1] for r in cur.fetchall()]  # r[1] é o nome da coluna
    if column not in cols:
        conn.execute(f"ALTER TABLE {table} ADD COLUMN {ddl};")


def _apply_v1(conn) -> None:
    for sql in SCHEMA_V1:
        conn.executescript(sql)


def _apply_v2(conn) -> None:
    _ensure_column(conn, "ordem_compra", "data_entrega", "data_entrega TEXT")


def apply_migrations(db_path: str) -> None:
    """Aplica migrações incrementais de acordo com PRAGMA user_version."""
    with connect(db_path) as conn:
        ver = conn.execute("PRAGMA user_version;").fetchone()[0] or 0

        if ver < 1:
            _apply_v1(conn)
            conn.execute("PRAGMA user_version = 1;")
            log_database_operation("schema", "MIGRATE", 0, versao=1)
            ver = 1

        if ver < 2:
            _apply_v2(conn)
            conn.execute("PRAGMA user_version = 2;")
            log_database_operation("schema", "MIGRATE", 0, versao=2)
            ver = 2
