"""
Políticas de classificação para estoque e lotes.

Este módulo contém as regras de negócio que classificam a situação do
estoque de um produto e a validade de um lote. As funções são puras:
recebem registros já carregados e a data de referência ``hoje`` de
forma explícita, sem consultar o relógio do sistema.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List, Optional

from suprimentos.domain.models import Lote, Produto, StatusEstoque, StatusLote


JANELA_VENCIMENTO_DIAS = 30


# -------------------------
# Estoque
# -------------------------

def status_estoque(produto: Produto, quantidade: Optional[int]) -> StatusEstoque:
    """Classifica o estoque de um produto para a quantidade atual.

    Regras, avaliadas nesta ordem (a primeira que casar vence):
        - ``quantidade is None`` → ``INDEFINIDO``
        - ``quantidade == 0`` → ``ZERADO``
        - ``quantidade <= ponto_pedido`` → ``CRITICO``
        - ``quantidade <= estoque_min`` → ``BAIXO``
        - ``quantidade >= estoque_max`` → ``EXCESSO``
        - caso contrário → ``NORMAL``

    Um limiar ``None`` não dispara a sua regra. Limiares fora de ordem
    (ex.: ``ponto_pedido > estoque_min``) não são corrigidos; a ordem de
    precedência acima decide.

    Args:
        produto: Produto com ``estoque_max``, ``estoque_min`` e ``ponto_pedido``.
        quantidade: Quantidade atual em estoque (ou ``None`` se desconhecida).

    Returns:
        Um membro de :class:`StatusEstoque`.
    """
    if quantidade is None:
        return StatusEstoque.INDEFINIDO
    if quantidade == 0:
        return StatusEstoque.ZERADO
    if produto.ponto_pedido is not None and quantidade <= produto.ponto_pedido:
        return StatusEstoque.CRITICO
    if produto.estoque_min is not None and quantidade <= produto.estoque_min:
        return StatusEstoque.BAIXO
    if produto.estoque_max is not None and quantidade >= produto.estoque_max:
        return StatusEstoque.EXCESSO
    return StatusEstoque.NORMAL


def precisa_reposicao(produto: Produto, quantidade: Optional[int]) -> bool:
    """``True`` quando a quantidade atingiu o ponto de pedido."""
    if quantidade is None or produto.ponto_pedido is None:
        return False
    return quantidade <= produto.ponto_pedido


def quantidade_dentro_limites(produto: Produto, quantidade: Optional[int]) -> bool:
    """``True`` quando ``estoque_min <= quantidade <= estoque_max``."""
    if quantidade is None or produto.estoque_min is None or produto.estoque_max is None:
        return False
    return produto.estoque_min <= quantidade <= produto.estoque_max


# -------------------------
# Validade de lotes
# -------------------------

def lote_vencido(lote: Lote, hoje: date) -> bool:
    """Um lote está vencido quando ``data_vencimento < hoje``."""
    if lote.data_vencimento is None:
        return False
    return lote.data_vencimento < hoje


def lote_proximo_vencimento(lote: Lote, hoje: date, janela_dias: int = JANELA_VENCIMENTO_DIAS) -> bool:
    """Verifica se o lote vence dentro da janela.

    A janela é fechada nas duas pontas: ``hoje <= data_vencimento <= hoje + janela_dias``.
    Um lote que vence hoje não está vencido e está próximo do vencimento.
    """
    if lote.data_vencimento is None:
        return False
    return hoje <= lote.data_vencimento <= hoje + timedelta(days=janela_dias)


def status_lote(lote: Lote, hoje: date, janela_dias: int = JANELA_VENCIMENTO_DIAS) -> StatusLote:
    if lote_vencido(lote, hoje):
        return StatusLote.VENCIDO
    if lote_proximo_vencimento(lote, hoje, janela_dias):
        return StatusLote.PROXIMO_VENCIMENTO
    return StatusLote.VALIDO


def dias_para_vencimento(lote: Lote, hoje: date) -> Optional[int]:
    """Dias até o vencimento (negativo se já venceu; ``None`` sem data)."""
    if lote.data_vencimento is None:
        return None
    return (lote.data_vencimento - hoje).days


def lote_tem_quantidade(lote: Lote) -> bool:
    return lote.quantidade is not None and lote.quantidade > 0


def _por_vencimento(lotes: Iterable[Lote]) -> List[Lote]:
    # lotes sem data vão para o fim; sort é estável para datas iguais
    return sorted(lotes, key=lambda l: (l.data_vencimento is None, l.data_vencimento or date.max))


def lotes_validos(lotes: Iterable[Lote], hoje: date) -> List[Lote]:
    """Lotes não vencidos (inclui os próximos do vencimento)."""
    return _por_vencimento(l for l in lotes if not lote_vencido(l, hoje))


def lotes_vencidos(lotes: Iterable[Lote], hoje: date) -> List[Lote]:
    return _por_vencimento(l for l in lotes if lote_vencido(l, hoje))


def lotes_proximos_vencimento(
    lotes: Iterable[Lote],
    hoje: date,
    janela_dias: int = JANELA_VENCIMENTO_DIAS,
) -> List[Lote]:
    return _por_vencimento(l for l in lotes if lote_proximo_vencimento(l, hoje, janela_dias))
