"""
Fórmulas de agregação contábil e de valores de compra.

Todas as contas usam ``Decimal`` para evitar deriva de arredondamento
ao somar muitos lançamentos pequenos. Os valores dos movimentos são
sempre magnitudes não negativas; o sinal vem do tipo (D/C) e só é
aplicado na agregação.

Convenção de saldo: ``saldo = débitos - créditos``.

As funções são puras e independentes da ordem dos movimentos.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Union

from suprimentos.domain.errors import ArgumentoInvalidoError
from suprimentos.domain.models import MovContabil, Produto, TipoMovimento


ZERO = Decimal("0")


def _soma_por_tipo(movimentos: Iterable[MovContabil], tipo: TipoMovimento) -> Decimal:
    total = ZERO
    for m in movimentos:
        if m.tipo == tipo and m.valor is not None:
            total += Decimal(m.valor)
    return total


def total_debitos(movimentos: Iterable[MovContabil]) -> Decimal:
    return _soma_por_tipo(movimentos, TipoMovimento.DEBITO)


def total_creditos(movimentos: Iterable[MovContabil]) -> Decimal:
    return _soma_por_tipo(movimentos, TipoMovimento.CREDITO)


def saldo(movimentos: Iterable[MovContabil]) -> Decimal:
    """Saldo dos movimentos: soma dos débitos menos soma dos créditos.

    Uma coleção vazia resulta em ``Decimal("0")``.
    """
    movimentos = list(movimentos)
    return total_debitos(movimentos) - total_creditos(movimentos)


def filtrar_periodo(movimentos: Iterable[MovContabil], inicio: date, fim: date) -> List[MovContabil]:
    """Movimentos com ``inicio <= data_lancamento <= fim``.

    Movimentos sem data de lançamento ficam de fora.
    """
    if inicio is None or fim is None:
        raise ArgumentoInvalidoError("Datas de início e fim não podem ser nulas")
    if inicio > fim:
        raise ArgumentoInvalidoError("Data inicial não pode ser posterior à data final")
    return [
        m for m in movimentos
        if m.data_lancamento is not None and inicio <= m.data_lancamento <= fim
    ]


def saldo_no_periodo(movimentos: Iterable[MovContabil], inicio: date, fim: date) -> Decimal:
    """Saldo restrito à janela fechada ``[inicio, fim]``."""
    return saldo(filtrar_periodo(movimentos, inicio, fim))


def lancamento_balanceado(movimentos: Iterable[MovContabil]) -> bool:
    """``True`` quando débitos e créditos de um lançamento se anulam."""
    return saldo(movimentos) == ZERO


def valor_total_item(quantidade: Optional[int], valor_unitario: Optional[Union[Decimal, str]]) -> Decimal:
    """Valor total de um item de ordem de compra (``quantidade * valor``)."""
    if quantidade is None or valor_unitario is None:
        return ZERO
    return Decimal(valor_unitario) * Decimal(quantidade)


def faixa_estoque(produto: Produto) -> int:
    """Amplitude entre estoque máximo e mínimo (0 se algum faltar)."""
    if produto.estoque_max is None or produto.estoque_min is None:
        return 0
    return produto.estoque_max - produto.estoque_min
