# suprimentos/usecases/ordens_compra.py
"""
UC: manutenção de ordens de compra e seus itens.

As regras de status e de exclusão moram em ``suprimentos.domain.ordem_compra``;
aqui ficam a leitura do estado gravado, a escolha do modo de transição
(parâmetro ``transicoes_estritas``) e o registro em log.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from suprimentos.config import DB_PATH
from suprimentos.domain.errors import ArgumentoInvalidoError, ConflitoError, NaoEncontradoError
from suprimentos.domain.formulas import ZERO, valor_total_item
from suprimentos.domain.models import ItemOrdemCompra, OrdemCompra, StatusOrdemCompra
from suprimentos.domain.ordem_compra import (
    ordem_em_atraso,
    ordem_finalizada,
    validar_atualizacao,
    validar_exclusao,
    validar_regras_ordem,
    validar_transicao,
)
from suprimentos.infra.logger import log_ordem, log_transaction
from suprimentos.infra.repositories import (
    ItemOrdemCompraRepo,
    LoteRepo,
    OrdemCompraRepo,
    ProdutoRepo,
)
from suprimentos.usecases.parametros import carregar_params, exigir_id, resolver_hoje


def obter_ordem(id_ordem: int, db_path: str = DB_PATH) -> OrdemCompra:
    exigir_id(id_ordem, "ID da ordem de compra")
    ordem = OrdemCompraRepo(db_path).get(id_ordem)
    if ordem is None:
        raise NaoEncontradoError(f"Ordem de compra não encontrada com ID: {id_ordem}")
    return ordem


def criar_ordem(ordem: OrdemCompra, db_path: str = DB_PATH, hoje: Optional[date] = None) -> OrdemCompra:
    hoje = resolver_hoje(hoje)
    if ordem.id is not None:
        raise ArgumentoInvalidoError("ID deve ser nulo para criação de nova ordem de compra")
    if ordem.status is None:
        ordem.status = StatusOrdemCompra.PEND
    try:
        validar_regras_ordem(ordem, hoje)
        ordem.id = OrdemCompraRepo(db_path).insert(ordem)
    except Exception as e:
        log_transaction("criar_ordem", {"valor": str(ordem.valor)}, error=str(e))
        raise
    log_ordem("insert", ordem.id, ordem.status.value, valor=str(ordem.valor))
    return ordem


def atualizar_ordem(ordem: OrdemCompra, db_path: str = DB_PATH, hoje: Optional[date] = None) -> OrdemCompra:
    """Substituição completa da ordem; ``data_ordem`` é imutável."""
    hoje = resolver_hoje(hoje)
    existente = obter_ordem(ordem.id, db_path)
    estrito = carregar_params(db_path).transicoes_estritas
    try:
        validar_atualizacao(ordem, existente, hoje, estrito)
        OrdemCompraRepo(db_path).update(ordem)
    except Exception as e:
        log_transaction("atualizar_ordem", {"id": ordem.id}, error=str(e))
        raise
    log_ordem("update", ordem.id, ordem.status.value, anterior=existente.status.value)
    return ordem


def alterar_status(
    id_ordem: int,
    novo_status: StatusOrdemCompra,
    db_path: str = DB_PATH,
    data_entrega: Optional[date] = None,
) -> OrdemCompra:
    """Muda apenas o status; ao concluir, registra a data de entrega se informada."""
    existente = obter_ordem(id_ordem, db_path)
    estrito = carregar_params(db_path).transicoes_estritas
    try:
        validar_transicao(existente.status, novo_status, estrito)
    except Exception as e:
        log_transaction(
            "alterar_status",
            {"id": id_ordem, "de": existente.status.value, "para": getattr(novo_status, "value", None)},
            error=str(e),
        )
        raise
    nova = replace(existente, status=novo_status)
    if novo_status == StatusOrdemCompra.CONC and data_entrega is not None:
        nova.data_entrega = data_entrega
    OrdemCompraRepo(db_path).update(nova)
    log_ordem("status", id_ordem, novo_status.value, anterior=existente.status.value)
    return nova


def excluir_ordem(id_ordem: int, db_path: str = DB_PATH) -> None:
    ordem = obter_ordem(id_ordem, db_path)
    validar_exclusao(ordem, LoteRepo(db_path).count_by_ordem(id_ordem))
    OrdemCompraRepo(db_path).delete(id_ordem)
    log_ordem("delete", id_ordem, ordem.status.value)


# -------------------------
# Consultas
# -------------------------

def listar_ordens_em_atraso(db_path: str = DB_PATH, hoje: Optional[date] = None) -> List[OrdemCompra]:
    """Ordens não concluídas com data prevista anterior a ``hoje``."""
    hoje = resolver_hoje(hoje)
    candidatas = OrdemCompraRepo(db_path).find_by_data_prevista_antes(hoje)
    return [o for o in candidatas if ordem_em_atraso(o, hoje)]


def listar_por_status(status: StatusOrdemCompra, db_path: str = DB_PATH) -> List[OrdemCompra]:
    if status is None:
        raise ArgumentoInvalidoError("Status não pode ser nulo")
    return OrdemCompraRepo(db_path).find_by_status(status)


def contar_por_status(db_path: str = DB_PATH) -> Dict[str, int]:
    repo = OrdemCompraRepo(db_path)
    return {s.value: repo.count_by_status(s) for s in StatusOrdemCompra}


def listar_por_valor(minimo: Decimal, maximo: Decimal, db_path: str = DB_PATH) -> List[OrdemCompra]:
    if minimo is None or maximo is None:
        raise ArgumentoInvalidoError("Valores mínimo e máximo não podem ser nulos")
    if minimo > maximo:
        raise ArgumentoInvalidoError("Valor mínimo não pode ser maior que o máximo")
    return OrdemCompraRepo(db_path).find_by_valor_between(Decimal(minimo), Decimal(maximo))


def listar_por_periodo(inicio: date, fim: date, db_path: str = DB_PATH) -> List[OrdemCompra]:
    """Ordens emitidas entre ``inicio`` e ``fim`` (inclusive)."""
    if inicio is None or fim is None:
        raise ArgumentoInvalidoError("Datas de início e fim não podem ser nulas")
    if inicio > fim:
        raise ArgumentoInvalidoError("Data inicial não pode ser posterior à data final")
    return OrdemCompraRepo(db_path).find_by_data_ordem_between(inicio, fim)


# -------------------------
# Itens
# -------------------------

def adicionar_item(item: ItemOrdemCompra, db_path: str = DB_PATH) -> ItemOrdemCompra:
    ordem = obter_ordem(item.id_ordem_compra, db_path)
    exigir_id(item.id_produto, "ID do produto")
    if ProdutoRepo(db_path).get(item.id_produto) is None:
        raise NaoEncontradoError(f"Produto não encontrado com ID: {item.id_produto}")
    if item.quantidade is None or item.quantidade <= 0:
        raise ArgumentoInvalidoError("Quantidade do item deve ser positiva")
    if item.valor is None or Decimal(item.valor) <= 0:
        raise ArgumentoInvalidoError("Valor do item deve ser positivo")
    if ordem_finalizada(ordem):
        raise ConflitoError(f"Não é possível adicionar itens a ordem concluída (ID: {ordem.id})")
    item.id = ItemOrdemCompraRepo(db_path).insert(item)
    log_ordem("item", ordem.id, ordem.status.value, id_item=item.id, id_produto=item.id_produto)
    return item


def listar_itens(id_ordem: int, db_path: str = DB_PATH) -> List[ItemOrdemCompra]:
    exigir_id(id_ordem, "ID da ordem de compra")
    return ItemOrdemCompraRepo(db_path).find_by_ordem(id_ordem)


def valor_total_itens(id_ordem: int, db_path: str = DB_PATH) -> Decimal:
    total = ZERO
    for item in listar_itens(id_ordem, db_path):
        total += valor_total_item(item.quantidade, item.valor)
    return total
