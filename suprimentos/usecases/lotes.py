# suprimentos/usecases/lotes.py
"""
UC: recebimento, ajuste e baixa de lotes; consultas por validade.

Regras de gravação:
- o lote referencia uma ordem de compra existente;
- quantidade nunca negativa;
- no recebimento, o vencimento não pode estar no passado e a fabricação
  não pode ser posterior ao vencimento;
- um lote só pode ser excluído depois de zerado.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from suprimentos.config import DB_PATH
from suprimentos.domain.errors import ArgumentoInvalidoError, ConflitoError, NaoEncontradoError
from suprimentos.domain.models import Lote
from suprimentos.domain.policies import (
    lotes_proximos_vencimento,
    lotes_validos,
    lotes_vencidos,
)
from suprimentos.infra.logger import log_lote, log_transaction
from suprimentos.infra.repositories import LoteRepo, OrdemCompraRepo, ProdutoRepo
from suprimentos.usecases.parametros import carregar_params, exigir_id, resolver_hoje


def _obter(id_lote: int, db_path: str) -> Lote:
    exigir_id(id_lote, "ID do lote")
    lote = LoteRepo(db_path).get(id_lote)
    if lote is None:
        raise NaoEncontradoError(f"Lote não encontrado com ID: {id_lote}")
    return lote


def _validar_quantidade_movimento(quantidade: int) -> None:
    if quantidade is None or quantidade <= 0:
        raise ArgumentoInvalidoError("Quantidade deve ser positiva")


def obter_lote(id_lote: int, db_path: str = DB_PATH) -> Lote:
    return _obter(id_lote, db_path)


def validar_lote(lote: Lote, db_path: str, hoje: date) -> None:
    if lote.id is not None:
        raise ArgumentoInvalidoError("ID deve ser nulo para criação de novo lote")
    exigir_id(lote.id_ordem_compra, "ID da ordem de compra")
    exigir_id(lote.id_produto, "ID do produto")
    if OrdemCompraRepo(db_path).get(lote.id_ordem_compra) is None:
        raise NaoEncontradoError(f"Ordem de compra não encontrada com ID: {lote.id_ordem_compra}")
    if ProdutoRepo(db_path).get(lote.id_produto) is None:
        raise NaoEncontradoError(f"Produto não encontrado com ID: {lote.id_produto}")
    if lote.quantidade is None or lote.quantidade < 0:
        raise ArgumentoInvalidoError("Quantidade não pode ser negativa")
    if lote.data_vencimento is None:
        raise ArgumentoInvalidoError("Data de vencimento é obrigatória")
    if lote.data_vencimento < hoje:
        raise ArgumentoInvalidoError("Data de vencimento não pode estar no passado")
    if lote.data_fabricacao is not None and lote.data_fabricacao > lote.data_vencimento:
        raise ArgumentoInvalidoError("Data de fabricação não pode ser posterior ao vencimento")


def registrar_lote(lote: Lote, db_path: str = DB_PATH, hoje: Optional[date] = None) -> Lote:
    """Registra o recebimento de um lote vinculado a uma ordem de compra."""
    hoje = resolver_hoje(hoje)
    dados = {"id_ordem_compra": lote.id_ordem_compra, "id_produto": lote.id_produto, "quantidade": lote.quantidade}
    try:
        validar_lote(lote, db_path, hoje)
        lote.id = LoteRepo(db_path).insert(lote)
    except Exception as e:
        log_transaction("registrar_lote", dados, error=str(e))
        raise
    log_lote("insert", lote.id, lote.quantidade, id_ordem_compra=lote.id_ordem_compra)
    log_transaction("registrar_lote", dados, result={"id_lote": lote.id})
    return lote


def corrigir_quantidade(id_lote: int, quantidade: int, db_path: str = DB_PATH) -> Lote:
    """Sobrescreve a quantidade do lote (inventário)."""
    lote = _obter(id_lote, db_path)
    if quantidade is None or quantidade < 0:
        raise ArgumentoInvalidoError("Quantidade não pode ser negativa")
    LoteRepo(db_path).update_quantidade(id_lote, quantidade)
    log_lote("ajuste", id_lote, quantidade, anterior=lote.quantidade)
    lote.quantidade = quantidade
    return lote


def adicionar_quantidade(id_lote: int, quantidade: int, db_path: str = DB_PATH) -> Lote:
    _validar_quantidade_movimento(quantidade)
    lote = _obter(id_lote, db_path)
    nova = (lote.quantidade or 0) + quantidade
    LoteRepo(db_path).update_quantidade(id_lote, nova)
    log_lote("entrada", id_lote, quantidade, saldo=nova)
    lote.quantidade = nova
    return lote


def remover_quantidade(id_lote: int, quantidade: int, db_path: str = DB_PATH) -> Lote:
    """Baixa parcial do lote; falha se a quantidade disponível não basta."""
    _validar_quantidade_movimento(quantidade)
    lote = _obter(id_lote, db_path)
    disponivel = lote.quantidade or 0
    if disponivel < quantidade:
        log_transaction(
            "remover_quantidade",
            {"id_lote": id_lote, "quantidade": quantidade},
            error=f"disponível {disponivel}",
        )
        raise ConflitoError(
            f"Quantidade insuficiente no lote {id_lote}. Disponível: {disponivel}, Solicitado: {quantidade}"
        )
    nova = disponivel - quantidade
    LoteRepo(db_path).update_quantidade(id_lote, nova)
    log_lote("baixa", id_lote, quantidade, saldo=nova)
    lote.quantidade = nova
    return lote


def excluir_lote(id_lote: int, db_path: str = DB_PATH) -> None:
    lote = _obter(id_lote, db_path)
    if lote.quantidade and lote.quantidade > 0:
        raise ConflitoError(
            f"Não é possível deletar lote com quantidade disponível (ID: {id_lote}, quantidade: {lote.quantidade})"
        )
    LoteRepo(db_path).delete(id_lote)
    log_lote("delete", id_lote, 0)


# -------------------------
# Consultas
# -------------------------

def listar_lotes_validos(db_path: str = DB_PATH, hoje: Optional[date] = None) -> List[Lote]:
    return lotes_validos(LoteRepo(db_path).get_all(), resolver_hoje(hoje))


def listar_lotes_vencidos(db_path: str = DB_PATH, hoje: Optional[date] = None) -> List[Lote]:
    return lotes_vencidos(LoteRepo(db_path).get_all(), resolver_hoje(hoje))


def listar_lotes_proximos_vencimento(
    db_path: str = DB_PATH,
    hoje: Optional[date] = None,
    janela_dias: Optional[int] = None,
) -> List[Lote]:
    """Lotes que vencem entre hoje e hoje + janela (parâmetro global por padrão)."""
    if janela_dias is None:
        janela_dias = carregar_params(db_path).janela_vencimento_dias
    if janela_dias < 0:
        raise ArgumentoInvalidoError("Janela de vencimento não pode ser negativa")
    return lotes_proximos_vencimento(LoteRepo(db_path).get_all(), resolver_hoje(hoje), janela_dias)


def listar_lotes_por_produto(id_produto: int, db_path: str = DB_PATH) -> List[Lote]:
    exigir_id(id_produto, "ID do produto")
    return LoteRepo(db_path).find_by_produto(id_produto)


def listar_lotes_por_ordem(id_ordem: int, db_path: str = DB_PATH) -> List[Lote]:
    exigir_id(id_ordem, "ID da ordem de compra")
    return LoteRepo(db_path).find_by_ordem(id_ordem)


def listar_lotes_zerados(db_path: str = DB_PATH) -> List[Lote]:
    return LoteRepo(db_path).find_zerados()


def total_quantidade_por_ordem(id_ordem: int, db_path: str = DB_PATH) -> int:
    exigir_id(id_ordem, "ID da ordem de compra")
    return LoteRepo(db_path).sum_quantidade_by_ordem(id_ordem)


def importar_lotes(lotes: List[Lote], db_path: str = DB_PATH, hoje: Optional[date] = None) -> List[Lote]:
    """Grava lotes vindos de planilha numa única transação, na ordem recebida.

    Todos os lotes são validados antes da gravação; se algum falhar,
    nenhum é gravado.
    """
    hoje = resolver_hoje(hoje)
    try:
        for l in lotes:
            validar_lote(l, db_path, hoje)
        ids = LoteRepo(db_path).insert_many(lotes)
    except Exception as e:
        log_transaction("importar_lotes", {"quantidade": len(lotes)}, error=str(e))
        raise
    for l, id_lote in zip(lotes, ids):
        l.id = id_lote
        log_lote("insert", l.id, l.quantidade, id_ordem_compra=l.id_ordem_compra)
    log_transaction("importar_lotes", {"quantidade": len(lotes)}, result={"ids": ids})
    return lotes
