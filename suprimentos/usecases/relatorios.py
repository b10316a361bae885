# suprimentos/usecases/relatorios.py
"""
Relatórios de suprimentos:
- validade de lotes (vencidos e próximos do vencimento)
- reposição de produtos (ZERADO, CRITICO, BAIXO)
- ordens de compra atrasadas
- razão contábil por conta em um período

Cada relatório devolve ``(colunas, linhas, mensagem)`` para exibição
tabular; ``exportar_relatorio`` grava o mesmo formato em CSV ou XLSX.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import List, Optional, Tuple

import pandas as pd

from suprimentos.config import DB_PATH
from suprimentos.domain.errors import ArgumentoInvalidoError
from suprimentos.domain.formulas import filtrar_periodo
from suprimentos.domain.models import Lote, StatusEstoque, StatusLote
from suprimentos.domain.policies import dias_para_vencimento, status_lote
from suprimentos.infra.db import connect
from suprimentos.infra.logger import (
    log_database_operation,
    log_file_operation,
    log_system_event,
    system_logger,
)
from suprimentos.infra.migrations import apply_migrations
from suprimentos.infra.repositories import MovContabilRepo
from suprimentos.infra.views import create_views
from suprimentos.usecases.contabil import totais_por_conta
from suprimentos.usecases.ordens_compra import listar_ordens_em_atraso
from suprimentos.usecases.parametros import carregar_params, resolver_hoje
from suprimentos.usecases.produtos import painel_estoque

Relatorio = Tuple[List[str], List[list], Optional[str]]

STATUS_REPOSICAO = (StatusEstoque.ZERADO, StatusEstoque.CRITICO, StatusEstoque.BAIXO)


def _preparar(db_path: str) -> None:
    apply_migrations(db_path)
    create_views(db_path)
    log_database_operation("views", "CREATE", 0)


def _msg_vazio(rows: List[list], msg: str) -> Optional[str]:
    return None if rows else msg


# ----------------------
# 1) Validade de lotes
# ----------------------

def relatorio_validade(
    janela_dias: Optional[int] = None,
    incluir_validos: bool = False,
    db_path: str = DB_PATH,
    hoje: Optional[date] = None,
) -> Relatorio:
    """
    Lotes com estoque classificados por validade.

    Por padrão lista apenas VENCIDO e PROXIMO_VENCIMENTO, ordenados por
    data de vencimento. A janela vem do parâmetro global quando omitida.
    """
    hoje = resolver_hoje(hoje)
    log_system_event("relatorio_validade_start", {"janela_dias": janela_dias, "hoje": hoje.isoformat()})
    try:
        _preparar(db_path)
        if janela_dias is None:
            janela_dias = carregar_params(db_path).janela_vencimento_dias

        with connect(db_path) as c:
            cur = c.execute(
                """
                SELECT id, id_produto, produto, id_ordem_compra, status_ordem,
                       data_fabricacao, data_vencimento, quantidade
                FROM vw_lotes_detalhe
                WHERE quantidade > 0
                ORDER BY data_vencimento, id
                """
            )
            registros = [dict(r) for r in cur.fetchall()]
        log_database_operation("vw_lotes_detalhe", "SELECT", len(registros))

        rows: List[list] = []
        for r in registros:
            lote = Lote(
                id=r["id"],
                id_ordem_compra=r["id_ordem_compra"],
                id_produto=r["id_produto"],
                data_vencimento=date.fromisoformat(r["data_vencimento"]) if r["data_vencimento"] else None,
                quantidade=r["quantidade"],
            )
            st = status_lote(lote, hoje, janela_dias)
            if st == StatusLote.VALIDO and not incluir_validos:
                continue
            rows.append([
                lote.id,
                r["produto"],
                lote.id_ordem_compra,
                r["data_vencimento"] or "",
                dias_para_vencimento(lote, hoje),
                lote.quantidade,
                st.value,
            ])

        system_logger.info(f"REPORT_VALIDADE: {len(rows)} lotes de {len(registros)} listados")
        columns = ["Lote", "Produto", "Ordem", "Vencimento", "Dias", "Quantidade", "Situação"]
        return columns, rows, _msg_vazio(rows, "Nenhum lote vencido ou próximo do vencimento.")
    except Exception as e:
        log_system_event("relatorio_validade_error", {"error": str(e)}, level="error")
        raise


# ----------------------
# 2) Reposição
# ----------------------

def relatorio_reposicao(db_path: str = DB_PATH) -> Relatorio:
    """Produtos em ZERADO, CRITICO ou BAIXO, do mais grave para o menos grave."""
    log_system_event("relatorio_reposicao_start", {"db_path": db_path})
    try:
        _preparar(db_path)
        gravidade = {s.value: i for i, s in enumerate(STATUS_REPOSICAO)}
        linhas = [r for r in painel_estoque(db_path) if r["status"] in gravidade]
        linhas.sort(key=lambda r: (gravidade[r["status"]], r["nome"]))
        rows = [
            [
                r["id"],
                r["nome"],
                r["quantidade"],
                r["estoque_min"],
                r["ponto_pedido"],
                r["estoque_max"],
                r["status"],
                r["descricao_status"],
            ]
            for r in linhas
        ]
        system_logger.info(f"REPORT_REPOSICAO: {len(rows)} produtos para repor")
        columns = ["ID", "Produto", "Quantidade", "Mínimo", "Ponto Pedido", "Máximo", "Status", "Descrição"]
        return columns, rows, _msg_vazio(rows, "Nenhum produto precisa de reposição.")
    except Exception as e:
        log_system_event("relatorio_reposicao_error", {"error": str(e)}, level="error")
        raise


# ----------------------
# 3) Ordens atrasadas
# ----------------------

def relatorio_ordens_atrasadas(db_path: str = DB_PATH, hoje: Optional[date] = None) -> Relatorio:
    hoje = resolver_hoje(hoje)
    log_system_event("relatorio_ordens_atrasadas_start", {"hoje": hoje.isoformat()})
    try:
        _preparar(db_path)
        ordens = listar_ordens_em_atraso(db_path, hoje)
        rows = [
            [
                o.id,
                o.status.value,
                str(o.valor),
                o.data_ordem.isoformat() if o.data_ordem else "",
                o.data_prevista.isoformat(),
                (hoje - o.data_prevista).days,
            ]
            for o in ordens
        ]
        columns = ["Ordem", "Status", "Valor", "Data Ordem", "Data Prevista", "Dias de Atraso"]
        return columns, rows, _msg_vazio(rows, "Nenhuma ordem de compra em atraso.")
    except Exception as e:
        log_system_event("relatorio_ordens_atrasadas_error", {"error": str(e)}, level="error")
        raise


# ----------------------
# 4) Razão por conta
# ----------------------

def relatorio_razao(inicio: date, fim: date, db_path: str = DB_PATH) -> Relatorio:
    """Débitos, créditos e saldo de cada conta no período ``[inicio, fim]``."""
    log_system_event("relatorio_razao_start", {"inicio": str(inicio), "fim": str(fim)})
    try:
        _preparar(db_path)
        movs = filtrar_periodo(MovContabilRepo(db_path).get_all(), inicio, fim)
        log_database_operation("mov_contabil", "SELECT_PERIODO", len(movs))
        rows = [
            [conta, str(t["debitos"]), str(t["creditos"]), str(t["saldo"])]
            for conta, t in totais_por_conta(movs).items()
        ]
        columns = ["Conta", "Débitos", "Créditos", "Saldo"]
        return columns, rows, _msg_vazio(rows, "Nenhuma movimentação no período.")
    except Exception as e:
        log_system_event("relatorio_razao_error", {"error": str(e)}, level="error")
        raise


# ----------------------
# Exportação
# ----------------------

def exportar_relatorio(columns: List[str], rows: List[list], path: str) -> Path:
    """Grava o relatório em ``.csv`` (separador ';') ou ``.xlsx``."""
    destino = Path(path)
    ext = destino.suffix.lower()
    df = pd.DataFrame(rows, columns=columns)
    if ext == ".csv":
        df.to_csv(destino, sep=";", index=False, encoding="utf-8-sig")
    elif ext == ".xlsx":
        df.to_excel(destino, index=False)
    else:
        raise ArgumentoInvalidoError(f"Formato de exportação não suportado: {ext or path}")
    log_file_operation("export", str(destino), len(df))
    return destino
