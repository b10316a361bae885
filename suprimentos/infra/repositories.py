# suprimentos/infra/repositories.py
"""
Repositórios (DAO) para acesso e manipulação de dados no SQLite.

Classes:
- ParamsRepo
- ProdutoRepo
- OrdemCompraRepo
- ItemOrdemCompraRepo
- LoteRepo
- MovContabilRepo

Os repositórios aceitam e devolvem as dataclasses de
``suprimentos.domain.models``. Consultas por faixa são sempre fechadas
nas duas pontas (BETWEEN). Nenhuma regra de negócio mora aqui.
"""

from __future__ import annotations

from dataclasses import asdict, fields
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from .db import connect
from suprimentos.domain.models import (
    ItemOrdemCompra,
    Lote,
    MovContabil,
    OrdemCompra,
    Produto,
    StatusOrdemCompra,
    TipoMovimento,
)


T = TypeVar("T")


# -------------------------
# Helpers
# -------------------------

def _to_db(value: Any) -> Any:
    """Converte valores do domínio para o formato gravado no SQLite."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, bool):
        return int(value)
    return value


def _as_params(obj: Any, skip: Tuple[str, ...] = ()) -> Dict[str, Any]:
    return {k: _to_db(v) for k, v in asdict(obj).items() if k not in skip}


def _to_date(val: Any) -> Optional[date]:
    if val is None or val == "":
        return None
    if isinstance(val, date):
        return val
    return date.fromisoformat(str(val)[:10])


def _to_decimal(val: Any) -> Optional[Decimal]:
    if val is None or val == "":
        return None
    return Decimal(str(val))


def _rows(cur) -> List[Dict[str, Any]]:
    cols = [d[0] for d in cur.description]
    return [dict(zip(cols, row)) for row in cur.fetchall()]


def _build(cls: Type[T], row: Dict[str, Any], conv: Dict[str, Any]) -> T:
    kwargs = {}
    for f in fields(cls):
        if f.name not in row:
            continue
        v = row[f.name]
        fn = conv.get(f.name)
        kwargs[f.name] = fn(v) if (fn is not None and v is not None) else v
    return cls(**kwargs)


_PRODUTO_CONV = {"temp_ideal": _to_decimal}
_ORDEM_CONV = {
    "valor": _to_decimal,
    "data_prevista": _to_date,
    "data_ordem": _to_date,
    "data_entrega": _to_date,
    "status": StatusOrdemCompra,
}
_ITEM_CONV = {"valor": _to_decimal, "data_vencimento": _to_date}
_LOTE_CONV = {"data_fabricacao": _to_date, "data_vencimento": _to_date}
_MOV_CONV = {"valor": _to_decimal, "data_lancamento": _to_date, "tipo": TipoMovimento}


# -------------------------
# Params
# -------------------------

class ParamsRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def set_many(self, items: Iterable[Tuple[str, str]]) -> None:
        with connect(self.db_path) as c:
            c.executemany(
                """
                INSERT INTO params (chave, valor)
                VALUES (?, ?)
                ON CONFLICT(chave) DO UPDATE SET valor=excluded.valor
                """,
                list(items),
            )

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        with connect(self.db_path) as c:
            row = c.execute("SELECT valor FROM params WHERE chave = ?", (key,)).fetchone()
            return row[0] if row else default

    def get_int(self, key: str, default: int) -> int:
        v = self.get(key, None)
        if v is None:
            return default
        try:
            return int(float(v))
        except ValueError:
            return default

    def get_bool(self, key: str, default: bool) -> bool:
        v = self.get(key, None)
        if v is None:
            return default
        s = str(v).strip().lower()
        if s in {"1", "true", "t", "sim", "s", "y", "yes"}:
            return True
        if s in {"0", "false", "f", "nao", "não", "n", "no"}:
            return False
        return default


# -------------------------
# Produto
# -------------------------

_PRODUTO_COLS = """id, nome, descricao, id_almoxarifado, id_unidade_medida, cod_barras,
                   temp_ideal, estoque_max, estoque_min, ponto_pedido"""


class ProdutoRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, produto: Produto) -> int:
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                INSERT INTO produto
                    (nome, descricao, id_almoxarifado, id_unidade_medida, cod_barras,
                     temp_ideal, estoque_max, estoque_min, ponto_pedido)
                VALUES
                    (:nome, :descricao, :id_almoxarifado, :id_unidade_medida, :cod_barras,
                     :temp_ideal, :estoque_max, :estoque_min, :ponto_pedido)
                """,
                _as_params(produto, skip=("id",)),
            )
            return cur.lastrowid

    def update(self, produto: Produto) -> int:
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                UPDATE produto SET
                    nome=:nome, descricao=:descricao, id_almoxarifado=:id_almoxarifado,
                    id_unidade_medida=:id_unidade_medida, cod_barras=:cod_barras,
                    temp_ideal=:temp_ideal, estoque_max=:estoque_max,
                    estoque_min=:estoque_min, ponto_pedido=:ponto_pedido
                WHERE id = :id
                """,
                _as_params(produto),
            )
            return cur.rowcount

    def _select(self, where: str = "", params: Tuple = (), order: str = "nome ASC") -> List[Produto]:
        with connect(self.db_path) as c:
            cur = c.execute(f"SELECT {_PRODUTO_COLS} FROM produto {where} ORDER BY {order}", params)
            return [_build(Produto, r, _PRODUTO_CONV) for r in _rows(cur)]

    def get(self, id_produto: int) -> Optional[Produto]:
        res = self._select("WHERE id = ?", (id_produto,))
        return res[0] if res else None

    def get_all(self) -> List[Produto]:
        return self._select()

    def find_by_cod_barras(self, cod_barras: str) -> Optional[Produto]:
        res = self._select("WHERE cod_barras = ?", (cod_barras,))
        return res[0] if res else None

    def search_nome(self, termo: str) -> List[Produto]:
        """Busca por substring no nome, sem diferenciar maiúsculas."""
        return self._select("WHERE UPPER(nome) LIKE UPPER(?)", (f"%{termo}%",))

    def search_descricao(self, termo: str) -> List[Produto]:
        return self._select("WHERE UPPER(descricao) LIKE UPPER(?)", (f"%{termo}%",))

    def quantidade_atual(self, id_produto: int) -> Optional[int]:
        """Quantidade em estoque (soma dos lotes); ``None`` se o produto não existe."""
        with connect(self.db_path) as c:
            row = c.execute(
                "SELECT quantidade FROM vw_estoque_produto WHERE id_produto = ?",
                (id_produto,),
            ).fetchone()
            return int(row[0]) if row else None

    def quantidades(self) -> Dict[int, int]:
        with connect(self.db_path) as c:
            cur = c.execute("SELECT id_produto, quantidade FROM vw_estoque_produto")
            return {int(r[0]): int(r[1]) for r in cur.fetchall()}


# -------------------------
# Ordem de compra
# -------------------------

_ORDEM_COLS = "id, status, valor, data_prevista, data_ordem, data_entrega"


class OrdemCompraRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, ordem: OrdemCompra) -> int:
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                INSERT INTO ordem_compra (status, valor, data_prevista, data_ordem, data_entrega)
                VALUES (:status, :valor, :data_prevista, :data_ordem, :data_entrega)
                """,
                _as_params(ordem, skip=("id",)),
            )
            return cur.lastrowid

    def update(self, ordem: OrdemCompra) -> int:
        """Substitui o registro inteiro (status incluído), sem validação."""
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                UPDATE ordem_compra SET
                    status=:status, valor=:valor, data_prevista=:data_prevista,
                    data_ordem=:data_ordem, data_entrega=:data_entrega
                WHERE id = :id
                """,
                _as_params(ordem),
            )
            return cur.rowcount

    def delete(self, id_ordem: int) -> int:
        with connect(self.db_path) as c:
            return c.execute("DELETE FROM ordem_compra WHERE id = ?", (id_ordem,)).rowcount

    def _select(self, where: str = "", params: Tuple = (), order: str = "id ASC") -> List[OrdemCompra]:
        with connect(self.db_path) as c:
            cur = c.execute(f"SELECT {_ORDEM_COLS} FROM ordem_compra {where} ORDER BY {order}", params)
            return [_build(OrdemCompra, r, _ORDEM_CONV) for r in _rows(cur)]

    def get(self, id_ordem: int) -> Optional[OrdemCompra]:
        res = self._select("WHERE id = ?", (id_ordem,))
        return res[0] if res else None

    def get_all(self) -> List[OrdemCompra]:
        return self._select()

    def find_by_status(self, status: StatusOrdemCompra) -> List[OrdemCompra]:
        return self._select("WHERE status = ?", (_to_db(status),))

    def count_by_status(self, status: StatusOrdemCompra) -> int:
        with connect(self.db_path) as c:
            row = c.execute("SELECT COUNT(*) FROM ordem_compra WHERE status = ?", (_to_db(status),)).fetchone()
            return int(row[0])

    def find_by_data_prevista(self, data_prevista: date) -> List[OrdemCompra]:
        return self._select("WHERE data_prevista = ?", (_to_db(data_prevista),))

    def find_by_data_prevista_antes(self, limite: date) -> List[OrdemCompra]:
        """Ordens com ``data_prevista < limite`` (candidatas a atraso)."""
        return self._select("WHERE data_prevista < ?", (_to_db(limite),), order="data_prevista ASC")

    def find_by_data_ordem_between(self, inicio: date, fim: date) -> List[OrdemCompra]:
        return self._select(
            "WHERE data_ordem BETWEEN ? AND ?",
            (_to_db(inicio), _to_db(fim)),
            order="data_ordem ASC",
        )

    def find_by_valor_between(self, minimo: Decimal, maximo: Decimal) -> List[OrdemCompra]:
        # valores ficam em TEXT; a comparação é feita em Decimal
        return [o for o in self.get_all() if minimo <= o.valor <= maximo]


# -------------------------
# Itens da ordem de compra
# -------------------------

class ItemOrdemCompraRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, item: ItemOrdemCompra) -> int:
        with connect(self.db_path) as c:
            cur = c.execute(
                """
                INSERT INTO item_ordem_compra
                    (id_ordem_compra, id_produto, quantidade, valor, data_vencimento)
                VALUES
                    (:id_ordem_compra, :id_produto, :quantidade, :valor, :data_vencimento)
                """,
                _as_params(item, skip=("id",)),
            )
            return cur.lastrowid

    def find_by_ordem(self, id_ordem: int) -> List[ItemOrdemCompra]:
        with connect(self.db_path) as c:
            cur = c.execute(
                """SELECT id, id_ordem_compra, id_produto, quantidade, valor, data_vencimento
                   FROM item_ordem_compra WHERE id_ordem_compra = ? ORDER BY id""",
                (id_ordem,),
            )
            return [_build(ItemOrdemCompra, r, _ITEM_CONV) for r in _rows(cur)]


# -------------------------
# Lote
# -------------------------

_LOTE_COLS = "id, id_ordem_compra, id_produto, data_fabricacao, data_vencimento, quantidade"

_LOTE_INSERT = """
    INSERT INTO lote
        (id_ordem_compra, id_produto, data_fabricacao, data_vencimento, quantidade)
    VALUES
        (:id_ordem_compra, :id_produto, :data_fabricacao, :data_vencimento, :quantidade)
"""


class LoteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, lote: Lote) -> int:
        with connect(self.db_path) as c:
            return c.execute(_LOTE_INSERT, _as_params(lote, skip=("id",))).lastrowid

    def insert_many(self, lotes: Iterable[Lote]) -> List[int]:
        """Grava todos os lotes numa única transação."""
        ids: List[int] = []
        with connect(self.db_path) as c:
            for l in lotes:
                ids.append(c.execute(_LOTE_INSERT, _as_params(l, skip=("id",))).lastrowid)
        return ids

    def update_quantidade(self, id_lote: int, quantidade: int) -> int:
        with connect(self.db_path) as c:
            return c.execute(
                "UPDATE lote SET quantidade = ? WHERE id = ?", (quantidade, id_lote)
            ).rowcount

    def delete(self, id_lote: int) -> int:
        with connect(self.db_path) as c:
            return c.execute("DELETE FROM lote WHERE id = ?", (id_lote,)).rowcount

    def _select(self, where: str = "", params: Tuple = (), order: str = "data_vencimento ASC, id ASC") -> List[Lote]:
        with connect(self.db_path) as c:
            cur = c.execute(f"SELECT {_LOTE_COLS} FROM lote {where} ORDER BY {order}", params)
            return [_build(Lote, r, _LOTE_CONV) for r in _rows(cur)]

    def get(self, id_lote: int) -> Optional[Lote]:
        res = self._select("WHERE id = ?", (id_lote,))
        return res[0] if res else None

    def get_all(self) -> List[Lote]:
        return self._select()

    def find_by_produto(self, id_produto: int) -> List[Lote]:
        return self._select("WHERE id_produto = ?", (id_produto,))

    def find_by_ordem(self, id_ordem: int) -> List[Lote]:
        return self._select("WHERE id_ordem_compra = ?", (id_ordem,))

    def find_by_vencimento_between(self, inicio: date, fim: date) -> List[Lote]:
        return self._select("WHERE data_vencimento BETWEEN ? AND ?", (_to_db(inicio), _to_db(fim)))

    def find_by_fabricacao_between(self, inicio: date, fim: date) -> List[Lote]:
        return self._select(
            "WHERE data_fabricacao BETWEEN ? AND ?",
            (_to_db(inicio), _to_db(fim)),
            order="data_fabricacao ASC, id ASC",
        )

    def find_by_quantidade_between(self, minimo: int, maximo: int) -> List[Lote]:
        return self._select("WHERE quantidade BETWEEN ? AND ?", (minimo, maximo), order="quantidade ASC, id ASC")

    def find_zerados(self) -> List[Lote]:
        return self._select("WHERE quantidade = 0")

    def count_by_ordem(self, id_ordem: int) -> int:
        with connect(self.db_path) as c:
            row = c.execute("SELECT COUNT(*) FROM lote WHERE id_ordem_compra = ?", (id_ordem,)).fetchone()
            return int(row[0])

    def sum_quantidade_by_ordem(self, id_ordem: int) -> int:
        with connect(self.db_path) as c:
            row = c.execute(
                "SELECT COALESCE(SUM(quantidade), 0) FROM lote WHERE id_ordem_compra = ?", (id_ordem,)
            ).fetchone()
            return int(row[0])


# -------------------------
# Movimentação contábil
# -------------------------

_MOV_COLS = "id, numero_lancamento, id_plano_conta, id_ordem_compra, data_lancamento, tipo, valor"

_MOV_INSERT = """
    INSERT INTO mov_contabil
        (numero_lancamento, id_plano_conta, id_ordem_compra, data_lancamento, tipo, valor)
    VALUES
        (:numero_lancamento, :id_plano_conta, :id_ordem_compra, :data_lancamento, :tipo, :valor)
"""


class MovContabilRepo:
    """Movimentos são imutáveis depois de gravados: não há update nem delete."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def insert(self, mov: MovContabil) -> int:
        with connect(self.db_path) as c:
            return c.execute(_MOV_INSERT, _as_params(mov, skip=("id",))).lastrowid

    def insert_many(self, movs: Iterable[MovContabil]) -> List[int]:
        """Grava todos os movimentos numa única transação."""
        ids: List[int] = []
        with connect(self.db_path) as c:
            for m in movs:
                ids.append(c.execute(_MOV_INSERT, _as_params(m, skip=("id",))).lastrowid)
        return ids

    def _select(self, where: str = "", params: Tuple = (), order: str = "data_lancamento ASC, id ASC") -> List[MovContabil]:
        with connect(self.db_path) as c:
            cur = c.execute(f"SELECT {_MOV_COLS} FROM mov_contabil {where} ORDER BY {order}", params)
            return [_build(MovContabil, r, _MOV_CONV) for r in _rows(cur)]

    def get(self, id_mov: int) -> Optional[MovContabil]:
        res = self._select("WHERE id = ?", (id_mov,))
        return res[0] if res else None

    def get_all(self) -> List[MovContabil]:
        return self._select()

    def find_by_plano_conta(self, id_plano_conta: int) -> List[MovContabil]:
        return self._select("WHERE id_plano_conta = ?", (id_plano_conta,))

    def find_by_plano_conta_periodo(self, id_plano_conta: int, inicio: date, fim: date) -> List[MovContabil]:
        return self._select(
            "WHERE id_plano_conta = ? AND data_lancamento BETWEEN ? AND ?",
            (id_plano_conta, _to_db(inicio), _to_db(fim)),
        )

    def find_by_periodo(self, inicio: date, fim: date) -> List[MovContabil]:
        return self._select("WHERE data_lancamento BETWEEN ? AND ?", (_to_db(inicio), _to_db(fim)))

    def find_by_data(self, data_lancamento: date) -> List[MovContabil]:
        return self._select("WHERE data_lancamento = ?", (_to_db(data_lancamento),))

    def find_by_numero(self, numero_lancamento: int) -> List[MovContabil]:
        return self._select("WHERE numero_lancamento = ?", (numero_lancamento,), order="id ASC")

    def find_by_ordem(self, id_ordem: int) -> List[MovContabil]:
        return self._select("WHERE id_ordem_compra = ?", (id_ordem,))

    def find_by_tipo(self, tipo: TipoMovimento) -> List[MovContabil]:
        return self._select("WHERE tipo = ?", (_to_db(tipo),))

    def count_by_ordem(self, id_ordem: int) -> int:
        with connect(self.db_path) as c:
            row = c.execute("SELECT COUNT(*) FROM mov_contabil WHERE id_ordem_compra = ?", (id_ordem,)).fetchone()
            return int(row[0])

    def next_numero_lancamento(self) -> int:
        with connect(self.db_path) as c:
            row = c.execute("SELECT COALESCE(MAX(numero_lancamento), 0) FROM mov_contabil").fetchone()
            return int(row[0]) + 1
