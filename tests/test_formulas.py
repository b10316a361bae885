import random
from datetime import date, timedelta
from decimal import Decimal

import pytest

from suprimentos.domain.errors import ArgumentoInvalidoError
from suprimentos.domain.formulas import (
    faixa_estoque,
    filtrar_periodo,
    lancamento_balanceado,
    saldo,
    saldo_no_periodo,
    total_creditos,
    total_debitos,
    valor_total_item,
)
from suprimentos.domain.models import MovContabil, Produto, TipoMovimento

D, C = TipoMovimento.DEBITO, TipoMovimento.CREDITO


def _mov(tipo, valor, dia=None, conta=1, numero=1):
    return MovContabil(
        numero_lancamento=numero,
        id_plano_conta=conta,
        tipo=tipo,
        valor=Decimal(valor),
        data_lancamento=dia,
    )


def test_saldo_debitos_menos_creditos():
    movs = [_mov(D, "100.00"), _mov(C, "40.00"), _mov(D, "5.50")]
    assert saldo(movs) == Decimal("65.50")
    assert total_debitos(movs) == Decimal("105.50")
    assert total_creditos(movs) == Decimal("40.00")


def test_saldo_vazio_e_zero():
    assert saldo([]) == Decimal("0")


def test_saldo_aceita_gerador():
    movs = [_mov(D, "10"), _mov(C, "3")]
    assert saldo(m for m in movs) == Decimal("7")


def test_saldo_independe_da_ordem():
    movs = [_mov(D if i % 3 else C, f"{i}.{i:02d}") for i in range(1, 20)]
    esperado = saldo(movs)
    rnd = random.Random(7)
    for _ in range(10):
        embaralhados = movs[:]
        rnd.shuffle(embaralhados)
        assert saldo(embaralhados) == esperado


def test_saldo_no_periodo_igual_ao_filtro():
    base = date(2025, 1, 1)
    movs = [
        _mov(D if i % 2 else C, str(10 + i), base + timedelta(days=i))
        for i in range(30)
    ] + [_mov(D, "999", None)]
    for inicio_off, fim_off in [(0, 29), (5, 5), (3, 17), (20, 40)]:
        inicio = base + timedelta(days=inicio_off)
        fim = base + timedelta(days=fim_off)
        esperado = saldo(
            m for m in movs
            if m.data_lancamento is not None and inicio <= m.data_lancamento <= fim
        )
        assert saldo_no_periodo(movs, inicio, fim) == esperado


def test_periodo_inclusivo_e_ignora_sem_data():
    movs = [
        _mov(D, "10", date(2025, 1, 1)),
        _mov(D, "20", date(2025, 1, 31)),
        _mov(D, "40", date(2025, 2, 1)),
        _mov(D, "80", None),
    ]
    assert saldo_no_periodo(movs, date(2025, 1, 1), date(2025, 1, 31)) == Decimal("30")
    assert len(filtrar_periodo(movs, date(2025, 1, 1), date(2025, 12, 31))) == 3


def test_periodo_invertido_falha():
    with pytest.raises(ArgumentoInvalidoError):
        saldo_no_periodo([], date(2025, 2, 1), date(2025, 1, 1))


def test_periodo_sem_datas_falha():
    with pytest.raises(ArgumentoInvalidoError):
        filtrar_periodo([], None, date(2025, 1, 1))


def test_lancamento_balanceado():
    assert lancamento_balanceado([_mov(D, "50"), _mov(C, "50.00")])
    assert not lancamento_balanceado([_mov(D, "50"), _mov(C, "49.99")])


def test_valor_total_item():
    assert valor_total_item(3, Decimal("2.50")) == Decimal("7.50")
    assert valor_total_item(None, Decimal("2.50")) == Decimal("0")
    assert valor_total_item(2, "1.25") == Decimal("2.50")


def test_faixa_estoque():
    p = Produto(nome="X", descricao="Y", id_unidade_medida=1, estoque_max=100, estoque_min=10)
    assert faixa_estoque(p) == 90
    p.estoque_min = None
    assert faixa_estoque(p) == 0
