"""
Ciclo de vida da ordem de compra.

Regras puras sobre o status de uma ordem: atraso na entrega,
legalidade de transições e condições para exclusão. A data de
referência ``hoje`` é sempre recebida como parâmetro.

Política de transições:
    - modo padrão (permissivo): qualquer status pode sobrescrever qualquer
      outro, exceto sair de ``CONC``;
    - modo estrito: apenas as arestas de ``TRANSICOES_ESTRITAS``.
Escrever o mesmo status é sempre permitido.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, FrozenSet, Optional

from suprimentos.domain.errors import ArgumentoInvalidoError, ConflitoError
from suprimentos.domain.models import OrdemCompra, StatusOrdemCompra


STATUS_TERMINAIS: FrozenSet[StatusOrdemCompra] = frozenset({StatusOrdemCompra.CONC})

TRANSICOES_ESTRITAS: Dict[StatusOrdemCompra, FrozenSet[StatusOrdemCompra]] = {
    StatusOrdemCompra.PEND: frozenset({StatusOrdemCompra.ANDA, StatusOrdemCompra.CONC}),
    StatusOrdemCompra.ANDA: frozenset({StatusOrdemCompra.PEND, StatusOrdemCompra.CONC}),
    StatusOrdemCompra.CONC: frozenset(),
}


def ordem_finalizada(ordem: OrdemCompra) -> bool:
    return ordem.status in STATUS_TERMINAIS


def ordem_em_atraso(ordem: OrdemCompra, hoje: date) -> bool:
    """Ordem não finalizada cuja data prevista de entrega já passou."""
    if ordem_finalizada(ordem) or ordem.data_prevista is None:
        return False
    return ordem.data_prevista < hoje


def transicao_permitida(
    atual: StatusOrdemCompra,
    novo: StatusOrdemCompra,
    estrito: bool = False,
) -> bool:
    if atual == novo:
        return True
    if estrito:
        return novo in TRANSICOES_ESTRITAS.get(atual, frozenset())
    return atual not in STATUS_TERMINAIS


def validar_transicao(
    atual: StatusOrdemCompra,
    novo: StatusOrdemCompra,
    estrito: bool = False,
) -> None:
    """Levanta ``ConflitoError`` se a transição ``atual -> novo`` não for permitida."""
    if novo is None:
        raise ArgumentoInvalidoError("Status da ordem de compra é obrigatório")
    if not transicao_permitida(atual, novo, estrito):
        if atual in STATUS_TERMINAIS:
            raise ConflitoError("Não é possível alterar status de ordem concluída")
        raise ConflitoError(f"Transição de status não permitida: {atual.value} -> {novo.value}")


def validar_regras_ordem(ordem: OrdemCompra, hoje: date) -> None:
    """Regras gerais de criação/atualização.

    - ``valor`` obrigatório e positivo;
    - ``data_ordem`` não pode ser futura;
    - ``data_prevista`` não pode ser anterior a ``data_ordem``.
    """
    if ordem.valor is None:
        raise ArgumentoInvalidoError("Valor da ordem de compra é obrigatório")
    if Decimal(ordem.valor) <= 0:
        raise ArgumentoInvalidoError("Valor deve ser positivo")
    if ordem.data_prevista is None:
        raise ArgumentoInvalidoError("Data prevista é obrigatória")
    if ordem.data_ordem is None:
        raise ArgumentoInvalidoError("Data da ordem é obrigatória")
    if ordem.data_ordem > hoje:
        raise ArgumentoInvalidoError("Data da ordem não pode ser futura")
    if ordem.data_prevista < ordem.data_ordem:
        raise ArgumentoInvalidoError("Data prevista deve ser posterior à data da ordem")


def validar_atualizacao(
    nova: OrdemCompra,
    existente: OrdemCompra,
    hoje: date,
    estrito: bool = False,
) -> None:
    """Regras de substituição de uma ordem já gravada."""
    validar_transicao(existente.status, nova.status, estrito)
    if existente.data_ordem is not None and existente.data_ordem != nova.data_ordem:
        raise ConflitoError("Data da ordem não pode ser alterada após criação")
    validar_regras_ordem(nova, hoje)


def validar_exclusao(ordem: OrdemCompra, qtd_lotes: Optional[int] = 0) -> None:
    """Ordens concluídas ou com lotes recebidos não podem ser excluídas."""
    if ordem_finalizada(ordem):
        raise ConflitoError(f"Não é possível deletar ordem de compra concluída (ID: {ordem.id})")
    if qtd_lotes:
        raise ConflitoError(
            f"Não é possível deletar ordem de compra com lotes vinculados (ID: {ordem.id}, lotes: {qtd_lotes})"
        )
