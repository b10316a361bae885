# suprimentos/infra/db.py
"""
Conexão SQLite usada pelos repositórios.

Cada chamada de repositório abre a sua própria conexão; não há estado
compartilhado entre chamadas.
"""

from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator, Union

from suprimentos.infra.logger import database_logger


@contextmanager
def connect(db_path: Union[str, "os.PathLike[str]"]) -> Iterator[sqlite3.Connection]:
    """
    Abre o banco em ``db_path`` com:
    - foreign_keys ON
    - row_factory = sqlite3.Row
    - commit ao sair (rollback e relança em caso de exceção)
    """
    conn = sqlite3.connect(os.fspath(db_path))
    try:
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        yield conn
        conn.commit()
    except Exception:
        database_logger.debug("ROLLBACK em %s", db_path)
        conn.rollback()
        raise
    finally:
        conn.close()
