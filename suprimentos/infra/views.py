# suprimentos/infra/views.py
"""
Criação de views auxiliares para consultas frequentes.

Views criadas:
- vw_estoque_produto: quantidade atual por produto (soma dos lotes).
- vw_lotes_detalhe:   lote com nome do produto e status da ordem.

Obs.:
- As views assumem que as migrações já foram aplicadas.
- A situação de validade NÃO é calculada aqui: depende de "hoje",
  que é passado explicitamente às políticas do domínio.
"""

from __future__ import annotations

from .db import connect


def create_views(db_path: str) -> None:
    with connect(db_path) as c:
        c.executescript(
            """
            ---------------------------
            -- Quantidade atual por produto
            -- Produtos sem lote aparecem com 0.
            ---------------------------
            DROP VIEW IF EXISTS vw_estoque_produto;
            CREATE VIEW vw_estoque_produto AS
            SELECT
                p.id                           AS id_produto,
                p.nome                         AS nome,
                COALESCE(SUM(l.quantidade), 0) AS quantidade,
                COUNT(l.id)                    AS qtd_lotes
            FROM produto p
            LEFT JOIN lote l ON l.id_produto = p.id
            GROUP BY p.id, p.nome;

            ---------------------------
            -- Detalhe de lotes
            ---------------------------
            DROP VIEW IF EXISTS vw_lotes_detalhe;
            CREATE VIEW vw_lotes_detalhe AS
            SELECT
                l.id,
                l.id_produto,
                p.nome                  AS produto,
                l.id_ordem_compra,
                o.status                AS status_ordem,
                date(l.data_fabricacao) AS data_fabricacao,
                date(l.data_vencimento) AS data_vencimento,
                l.quantidade
            FROM lote l
            JOIN produto p      ON p.id = l.id_produto
            JOIN ordem_compra o ON o.id = l.id_ordem_compra;
            """
        )

        c.executescript(
            """
            CREATE INDEX IF NOT EXISTS idx_lote_produto      ON lote(id_produto);
            CREATE INDEX IF NOT EXISTS idx_lote_ordem        ON lote(id_ordem_compra);
            CREATE INDEX IF NOT EXISTS idx_lote_vencimento   ON lote(data_vencimento);
            CREATE INDEX IF NOT EXISTS idx_ordem_status      ON ordem_compra(status);
            CREATE INDEX IF NOT EXISTS idx_ordem_prevista    ON ordem_compra(data_prevista);
            CREATE INDEX IF NOT EXISTS idx_item_ordem        ON item_ordem_compra(id_ordem_compra);
            CREATE INDEX IF NOT EXISTS idx_mov_conta_data    ON mov_contabil(id_plano_conta, data_lancamento);
            CREATE INDEX IF NOT EXISTS idx_mov_lancamento    ON mov_contabil(numero_lancamento);
            CREATE INDEX IF NOT EXISTS idx_mov_ordem         ON mov_contabil(id_ordem_compra);
            CREATE INDEX IF NOT EXISTS idx_produto_barras    ON produto(cod_barras);
            """
        )
