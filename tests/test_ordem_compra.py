from datetime import date, timedelta
from decimal import Decimal

import pytest

from suprimentos.domain.errors import ArgumentoInvalidoError, ConflitoError
from suprimentos.domain.models import OrdemCompra, StatusOrdemCompra
from suprimentos.domain.ordem_compra import (
    ordem_em_atraso,
    transicao_permitida,
    validar_atualizacao,
    validar_exclusao,
    validar_regras_ordem,
    validar_transicao,
)

PEND, ANDA, CONC = StatusOrdemCompra.PEND, StatusOrdemCompra.ANDA, StatusOrdemCompra.CONC
HOJE = date(2025, 6, 15)


def _ordem(status=PEND, prevista=HOJE, data_ordem=HOJE - timedelta(days=10), valor="100.00", id_ordem=1):
    return OrdemCompra(
        valor=Decimal(valor),
        data_prevista=prevista,
        data_ordem=data_ordem,
        status=status,
        id=id_ordem,
    )


@pytest.mark.parametrize(
    "status,prevista,esperado",
    [
        (PEND, HOJE - timedelta(days=1), True),
        (ANDA, HOJE - timedelta(days=1), True),
        (CONC, HOJE - timedelta(days=1), False),
        (PEND, HOJE, False),
        (ANDA, HOJE + timedelta(days=1), False),
    ],
)
def test_ordem_em_atraso(status, prevista, esperado):
    assert ordem_em_atraso(_ordem(status, prevista), HOJE) is esperado


def test_ordem_sem_data_prevista_nao_atrasa():
    assert not ordem_em_atraso(_ordem(prevista=None), HOJE)


@pytest.mark.parametrize(
    "atual,novo",
    [(PEND, ANDA), (PEND, CONC), (ANDA, PEND), (ANDA, CONC), (PEND, PEND), (CONC, CONC)],
)
def test_transicoes_permitidas_no_modo_padrao(atual, novo):
    assert transicao_permitida(atual, novo)
    validar_transicao(atual, novo)


@pytest.mark.parametrize("novo", [PEND, ANDA])
def test_ordem_concluida_nao_muda_de_status(novo):
    assert not transicao_permitida(CONC, novo)
    assert not transicao_permitida(CONC, novo, estrito=True)
    with pytest.raises(ConflitoError, match="concluída"):
        validar_transicao(CONC, novo)


def test_modo_estrito_mesmas_arestas():
    for atual, novo in [(PEND, ANDA), (PEND, CONC), (ANDA, PEND), (ANDA, CONC)]:
        assert transicao_permitida(atual, novo, estrito=True)


def test_status_nulo_e_argumento_invalido():
    with pytest.raises(ArgumentoInvalidoError):
        validar_transicao(PEND, None)


def test_regras_gerais():
    validar_regras_ordem(_ordem(), HOJE)
    with pytest.raises(ArgumentoInvalidoError, match="positivo"):
        validar_regras_ordem(_ordem(valor="0"), HOJE)
    with pytest.raises(ArgumentoInvalidoError, match="futura"):
        validar_regras_ordem(_ordem(data_ordem=HOJE + timedelta(days=1), prevista=HOJE + timedelta(days=5)), HOJE)
    with pytest.raises(ArgumentoInvalidoError, match="posterior"):
        validar_regras_ordem(_ordem(prevista=HOJE - timedelta(days=20)), HOJE)


def test_data_da_ordem_imutavel():
    existente = _ordem()
    nova = _ordem(data_ordem=HOJE - timedelta(days=3))
    with pytest.raises(ConflitoError, match="Data da ordem"):
        validar_atualizacao(nova, existente, HOJE)


def test_atualizacao_valida():
    existente = _ordem()
    nova = _ordem(status=ANDA, valor="150.00")
    validar_atualizacao(nova, existente, HOJE)


def test_exclusao():
    validar_exclusao(_ordem(), 0)
    with pytest.raises(ConflitoError, match="concluída"):
        validar_exclusao(_ordem(status=CONC))
    with pytest.raises(ConflitoError, match="lotes"):
        validar_exclusao(_ordem(), 2)
