from datetime import date, timedelta
from decimal import Decimal

import pytest

from suprimentos.domain.errors import (
    ArgumentoInvalidoError,
    ConflitoError,
    NaoEncontradoError,
)
from suprimentos.domain.models import (
    ItemOrdemCompra,
    Lote,
    MovContabil,
    OrdemCompra,
    Produto,
    StatusOrdemCompra,
    TipoMovimento,
)
from suprimentos.infra.repositories import LoteRepo, MovContabilRepo, ParamsRepo
from suprimentos.usecases import contabil, lotes, ordens_compra, produtos
from suprimentos.usecases.parametros import carregar_params

HOJE = date(2025, 6, 15)


def _produto(db_path, nome="Luva", minimo=10, maximo=100, ponto=5):
    return produtos.cadastrar_produto(
        Produto(
            nome=nome,
            descricao=f"{nome} de procedimento",
            id_unidade_medida=1,
            estoque_min=minimo,
            estoque_max=maximo,
            ponto_pedido=ponto,
        ),
        db_path,
    )


def _ordem(db_path, prevista=HOJE + timedelta(days=5), valor="500.00"):
    return ordens_compra.criar_ordem(
        OrdemCompra(valor=Decimal(valor), data_prevista=prevista, data_ordem=HOJE - timedelta(days=30)),
        db_path,
        hoje=HOJE,
    )


def _lote(db_path, p, o, dias=60, qtd=10):
    return lotes.registrar_lote(
        Lote(id_ordem_compra=o.id, id_produto=p.id, data_vencimento=HOJE + timedelta(days=dias), quantidade=qtd),
        db_path,
        hoje=HOJE,
    )


# -------------------------
# parâmetros
# -------------------------

def test_params_com_fallback(db_path):
    params = carregar_params(db_path)
    assert params.janela_vencimento_dias == 30
    assert params.transicoes_estritas is False
    ParamsRepo(db_path).set_many([("janela_vencimento_dias", "7"), ("transicoes_estritas", "1")])
    params = carregar_params(db_path)
    assert params.janela_vencimento_dias == 7
    assert params.transicoes_estritas is True


# -------------------------
# produtos
# -------------------------

def test_cadastro_e_status_de_produto(db_path):
    p = _produto(db_path)
    o = _ordem(db_path)
    res = produtos.consultar_status_estoque(p.id, db_path)
    assert res["quantidade"] == 0
    assert res["status"] == "ZERADO"

    _lote(db_path, p, o, qtd=3)
    _lote(db_path, p, o, dias=90, qtd=2)
    res = produtos.consultar_status_estoque(p.id, db_path)
    assert res["quantidade"] == 5
    assert res["status"] == "CRITICO"
    assert res["precisa_reposicao"] is True
    assert res["descricao_status"] == "Estoque Crítico"


@pytest.mark.parametrize(
    "campo,valor,mensagem",
    [
        ("nome", "  ", "Nome"),
        ("nome", "x" * 51, "50"),
        ("descricao", "", "Descrição"),
        ("estoque_max", 0, "máximo"),
        ("estoque_min", -1, "mínimo"),
        ("ponto_pedido", None, "Ponto de pedido"),
        ("temp_ideal", Decimal("120"), "Temperatura"),
        ("temp_ideal", Decimal("2.25"), "casa decimal"),
    ],
)
def test_validacao_de_produto(db_path, campo, valor, mensagem):
    p = Produto(nome="Luva", descricao="Luva", id_unidade_medida=1, estoque_max=10, estoque_min=1, ponto_pedido=1)
    setattr(p, campo, valor)
    with pytest.raises(ArgumentoInvalidoError, match=mensagem):
        produtos.cadastrar_produto(p, db_path)


def test_busca_e_atualizacao_de_produto(db_path):
    p = _produto(db_path, nome="Seringa")
    _produto(db_path, nome="Agulha")
    assert [x.nome for x in produtos.buscar_produtos("SERING", db_path)] == ["Seringa"]
    assert len(produtos.buscar_produtos("procedimento", db_path)) == 2
    with pytest.raises(ArgumentoInvalidoError):
        produtos.buscar_produtos(" ", db_path)

    p.estoque_max = 200
    produtos.atualizar_produto(p, db_path)
    assert produtos.obter_produto(p.id, db_path).estoque_max == 200
    with pytest.raises(NaoEncontradoError):
        produtos.obter_produto(999, db_path)
    with pytest.raises(ArgumentoInvalidoError):
        produtos.obter_produto(None, db_path)


def test_painel_estoque(db_path):
    p1 = _produto(db_path, nome="A")
    p2 = _produto(db_path, nome="B")
    o = _ordem(db_path)
    _lote(db_path, p1, o, qtd=50)
    painel = {r["id"]: r for r in produtos.painel_estoque(db_path)}
    assert painel[p1.id]["status"] == "NORMAL"
    assert painel[p2.id]["status"] == "ZERADO"


# -------------------------
# lotes
# -------------------------

def test_registrar_lote_regras(db_path):
    p = _produto(db_path)
    o = _ordem(db_path)
    with pytest.raises(NaoEncontradoError):
        lotes.registrar_lote(Lote(999, p.id, HOJE, 1), db_path, hoje=HOJE)
    with pytest.raises(ArgumentoInvalidoError):
        lotes.registrar_lote(Lote(None, p.id, HOJE, 1), db_path, hoje=HOJE)
    with pytest.raises(ArgumentoInvalidoError, match="negativa"):
        lotes.registrar_lote(Lote(o.id, p.id, HOJE, -1), db_path, hoje=HOJE)
    with pytest.raises(ArgumentoInvalidoError, match="passado"):
        lotes.registrar_lote(Lote(o.id, p.id, HOJE - timedelta(days=1), 1), db_path, hoje=HOJE)
    with pytest.raises(ArgumentoInvalidoError, match="fabricação"):
        lotes.registrar_lote(
            Lote(o.id, p.id, HOJE, 1, data_fabricacao=HOJE + timedelta(days=1)), db_path, hoje=HOJE
        )
    lote = lotes.registrar_lote(Lote(o.id, p.id, HOJE, 1), db_path, hoje=HOJE)
    assert lote.id is not None


def test_movimentacao_de_quantidade(db_path):
    p = _produto(db_path)
    o = _ordem(db_path)
    lote = _lote(db_path, p, o, qtd=10)

    assert lotes.adicionar_quantidade(lote.id, 5, db_path).quantidade == 15
    assert lotes.remover_quantidade(lote.id, 12, db_path).quantidade == 3
    with pytest.raises(ConflitoError, match="insuficiente"):
        lotes.remover_quantidade(lote.id, 4, db_path)
    with pytest.raises(ArgumentoInvalidoError):
        lotes.adicionar_quantidade(lote.id, 0, db_path)
    with pytest.raises(ArgumentoInvalidoError):
        lotes.remover_quantidade(lote.id, -1, db_path)
    with pytest.raises(NaoEncontradoError):
        lotes.remover_quantidade(999, 1, db_path)

    assert lotes.corrigir_quantidade(lote.id, 8, db_path).quantidade == 8
    assert lotes.obter_lote(lote.id, db_path).quantidade == 8


def test_excluir_lote_somente_zerado(db_path):
    p = _produto(db_path)
    o = _ordem(db_path)
    lote = _lote(db_path, p, o, qtd=2)
    with pytest.raises(ConflitoError):
        lotes.excluir_lote(lote.id, db_path)
    lotes.remover_quantidade(lote.id, 2, db_path)
    assert [l.id for l in lotes.listar_lotes_zerados(db_path)] == [lote.id]
    lotes.excluir_lote(lote.id, db_path)
    with pytest.raises(NaoEncontradoError):
        lotes.obter_lote(lote.id, db_path)


def test_importar_lotes_grava_tudo_ou_nada(db_path):
    p = _produto(db_path)
    o = _ordem(db_path)
    venc = HOJE + timedelta(days=30)
    with pytest.raises(NaoEncontradoError, match="999"):
        lotes.importar_lotes(
            [Lote(o.id, p.id, venc, 5), Lote(o.id, p.id, venc, 6), Lote(999, p.id, venc, 7)],
            db_path,
            hoje=HOJE,
        )
    assert LoteRepo(db_path).get_all() == []

    gravados = lotes.importar_lotes([Lote(o.id, p.id, venc, 5), Lote(o.id, p.id, venc, 6)], db_path, hoje=HOJE)
    assert all(l.id is not None for l in gravados)
    assert lotes.total_quantidade_por_ordem(o.id, db_path) == 11


def test_listagens_por_validade(db_path):
    p = _produto(db_path)
    o = _ordem(db_path)
    perto = _lote(db_path, p, o, dias=10)
    longe = _lote(db_path, p, o, dias=90)
    depois = HOJE + timedelta(days=20)

    assert [l.id for l in lotes.listar_lotes_vencidos(db_path, hoje=depois)] == [perto.id]
    assert [l.id for l in lotes.listar_lotes_validos(db_path, hoje=depois)] == [longe.id]
    assert [l.id for l in lotes.listar_lotes_proximos_vencimento(db_path, hoje=HOJE)] == [perto.id]
    assert lotes.listar_lotes_proximos_vencimento(db_path, hoje=HOJE, janela_dias=5) == []

    ParamsRepo(db_path).set_many([("janela_vencimento_dias", "120")])
    assert len(lotes.listar_lotes_proximos_vencimento(db_path, hoje=HOJE)) == 2

    assert len(lotes.listar_lotes_por_produto(p.id, db_path)) == 2
    assert len(lotes.listar_lotes_por_ordem(o.id, db_path)) == 2
    assert lotes.total_quantidade_por_ordem(o.id, db_path) == 20


# -------------------------
# ordens de compra
# -------------------------

def test_criar_ordem_regras(db_path):
    o = _ordem(db_path)
    assert o.status == StatusOrdemCompra.PEND
    with pytest.raises(ArgumentoInvalidoError):
        _ordem(db_path, valor="-1")
    with pytest.raises(ArgumentoInvalidoError):
        ordens_compra.criar_ordem(o, db_path, hoje=HOJE)


def test_ciclo_de_status(db_path):
    o = _ordem(db_path)
    assert ordens_compra.alterar_status(o.id, StatusOrdemCompra.ANDA, db_path).status == StatusOrdemCompra.ANDA
    assert ordens_compra.alterar_status(o.id, StatusOrdemCompra.PEND, db_path).status == StatusOrdemCompra.PEND
    conc = ordens_compra.alterar_status(o.id, StatusOrdemCompra.CONC, db_path, data_entrega=HOJE)
    assert conc.data_entrega == HOJE
    assert ordens_compra.obter_ordem(o.id, db_path).status == StatusOrdemCompra.CONC
    with pytest.raises(ConflitoError):
        ordens_compra.alterar_status(o.id, StatusOrdemCompra.ANDA, db_path)
    with pytest.raises(ConflitoError):
        ordens_compra.excluir_ordem(o.id, db_path)


def test_atualizar_ordem(db_path):
    o = _ordem(db_path)
    o.valor = Decimal("750.00")
    o.status = StatusOrdemCompra.ANDA
    ordens_compra.atualizar_ordem(o, db_path, hoje=HOJE)
    gravada = ordens_compra.obter_ordem(o.id, db_path)
    assert gravada.valor == Decimal("750.00")
    assert gravada.status == StatusOrdemCompra.ANDA

    o.data_ordem = HOJE - timedelta(days=1)
    with pytest.raises(ConflitoError):
        ordens_compra.atualizar_ordem(o, db_path, hoje=HOJE)


def test_excluir_ordem(db_path):
    p = _produto(db_path)
    livre = _ordem(db_path)
    com_lote = _ordem(db_path)
    _lote(db_path, p, com_lote)
    with pytest.raises(ConflitoError, match="lotes"):
        ordens_compra.excluir_ordem(com_lote.id, db_path)
    ordens_compra.excluir_ordem(livre.id, db_path)
    with pytest.raises(NaoEncontradoError):
        ordens_compra.obter_ordem(livre.id, db_path)


def test_ordens_em_atraso(db_path):
    atrasada = _ordem(db_path, prevista=HOJE - timedelta(days=2))
    concluida = _ordem(db_path, prevista=HOJE - timedelta(days=2))
    _ordem(db_path, prevista=HOJE)
    ordens_compra.alterar_status(concluida.id, StatusOrdemCompra.CONC, db_path)
    assert [o.id for o in ordens_compra.listar_ordens_em_atraso(db_path, hoje=HOJE)] == [atrasada.id]


def test_consultas_de_ordens(db_path):
    a = _ordem(db_path, valor="100")
    b = _ordem(db_path, valor="900")
    ordens_compra.alterar_status(b.id, StatusOrdemCompra.ANDA, db_path)
    assert ordens_compra.contar_por_status(db_path) == {"PEND": 1, "ANDA": 1, "CONC": 0}
    assert [o.id for o in ordens_compra.listar_por_status(StatusOrdemCompra.PEND, db_path)] == [a.id]
    assert [o.id for o in ordens_compra.listar_por_valor(Decimal("50"), Decimal("500"), db_path)] == [a.id]
    with pytest.raises(ArgumentoInvalidoError):
        ordens_compra.listar_por_valor(Decimal("500"), Decimal("50"), db_path)
    periodo = ordens_compra.listar_por_periodo(HOJE - timedelta(days=30), HOJE, db_path)
    assert len(periodo) == 2


def test_transicoes_estritas_configuraveis(db_path):
    o = _ordem(db_path)
    ParamsRepo(db_path).set_many([("transicoes_estritas", "1")])
    ordens_compra.alterar_status(o.id, StatusOrdemCompra.ANDA, db_path)
    ordens_compra.alterar_status(o.id, StatusOrdemCompra.CONC, db_path)
    with pytest.raises(ConflitoError):
        ordens_compra.alterar_status(o.id, StatusOrdemCompra.PEND, db_path)


def test_itens_da_ordem(db_path):
    p = _produto(db_path)
    o = _ordem(db_path)
    ordens_compra.adicionar_item(ItemOrdemCompra(o.id, p.id, 4, Decimal("12.50")), db_path)
    ordens_compra.adicionar_item(ItemOrdemCompra(o.id, p.id, 1, Decimal("0.75")), db_path)
    assert ordens_compra.valor_total_itens(o.id, db_path) == Decimal("50.75")
    with pytest.raises(ArgumentoInvalidoError):
        ordens_compra.adicionar_item(ItemOrdemCompra(o.id, p.id, 0, Decimal("1")), db_path)
    ordens_compra.alterar_status(o.id, StatusOrdemCompra.CONC, db_path)
    with pytest.raises(ConflitoError):
        ordens_compra.adicionar_item(ItemOrdemCompra(o.id, p.id, 1, Decimal("1")), db_path)


# -------------------------
# contabilidade
# -------------------------

def test_saldo_de_conta(db_path):
    for tipo, valor in [(TipoMovimento.DEBITO, "100.00"), (TipoMovimento.CREDITO, "40.00"), (TipoMovimento.DEBITO, "5.50")]:
        contabil.registrar_movimento(
            MovContabil(1, 10, tipo, Decimal(valor), HOJE), db_path
        )
    assert contabil.saldo_conta(10, db_path) == Decimal("65.50")
    assert contabil.saldo_conta(11, db_path) == Decimal("0")


def test_saldo_de_conta_no_periodo(db_path):
    contabil.registrar_movimento(MovContabil(1, 10, TipoMovimento.DEBITO, Decimal("10"), date(2025, 1, 10)), db_path)
    contabil.registrar_movimento(MovContabil(2, 10, TipoMovimento.DEBITO, Decimal("20"), date(2025, 2, 10)), db_path)
    contabil.registrar_movimento(MovContabil(3, 10, TipoMovimento.CREDITO, Decimal("5"), date(2025, 3, 10)), db_path)
    assert contabil.saldo_conta_periodo(10, date(2025, 1, 1), date(2025, 1, 31), db_path) == Decimal("10")
    assert contabil.saldo_conta(10, db_path) == Decimal("25")
    assert contabil.saldo_conta_periodo(10, date(2000, 1, 1), date(2099, 12, 31), db_path) == contabil.saldo_conta(10, db_path)
    with pytest.raises(ArgumentoInvalidoError):
        contabil.saldo_conta_periodo(10, date(2025, 2, 1), date(2025, 1, 1), db_path)
    assert len(contabil.relatorio_por_periodo(date(2025, 1, 1), date(2025, 12, 31), db_path)) == 3


def test_movimento_sem_data_rejeitado(db_path):
    with pytest.raises(ArgumentoInvalidoError, match="Data de lançamento"):
        contabil.registrar_movimento(MovContabil(1, 10, TipoMovimento.DEBITO, Decimal("40")), db_path)
    with pytest.raises(ArgumentoInvalidoError, match="Data de lançamento"):
        contabil.importar_movimentos(
            [
                MovContabil(1, 10, TipoMovimento.DEBITO, Decimal("5"), HOJE),
                MovContabil(1, 20, TipoMovimento.CREDITO, Decimal("5")),
            ],
            db_path,
        )
    assert MovContabilRepo(db_path).get_all() == []


@pytest.mark.parametrize(
    "mov,erro",
    [
        (MovContabil(1, 10, TipoMovimento.DEBITO, Decimal("0")), ArgumentoInvalidoError),
        (MovContabil(1, None, TipoMovimento.DEBITO, Decimal("1")), ArgumentoInvalidoError),
        (MovContabil(1, 10, None, Decimal("1")), ArgumentoInvalidoError),
        (MovContabil(1, 10, TipoMovimento.CREDITO, Decimal("1"), HOJE, id_ordem_compra=999), NaoEncontradoError),
    ],
)
def test_movimento_invalido(db_path, mov, erro):
    with pytest.raises(erro):
        contabil.registrar_movimento(mov, db_path)


def test_lancamento_balanceado(db_path):
    o = _ordem(db_path)
    d, c = contabil.criar_lancamento_balanceado(10, 20, Decimal("300.00"), HOJE, o.id, db_path=db_path)
    assert d.numero_lancamento == c.numero_lancamento == 1
    assert d.tipo == TipoMovimento.DEBITO and c.tipo == TipoMovimento.CREDITO
    assert contabil.lancamento_esta_balanceado(1, db_path)
    assert contabil.saldo_conta(10, db_path) == Decimal("300.00")
    assert contabil.saldo_conta(20, db_path) == Decimal("-300.00")
    assert len(contabil.listar_por_ordem(o.id, db_path)) == 2
    assert len(contabil.listar_por_tipo(TipoMovimento.CREDITO, db_path)) == 1

    d2, _ = contabil.criar_lancamento_balanceado(10, 20, Decimal("1"), db_path=db_path)
    assert d2.numero_lancamento == 2
    assert d2.data_lancamento == date.today()
    with pytest.raises(NaoEncontradoError):
        contabil.lancamento_esta_balanceado(99, db_path)


def test_totais_por_conta():
    movs = [
        MovContabil(1, 20, TipoMovimento.CREDITO, Decimal("5")),
        MovContabil(1, 10, TipoMovimento.DEBITO, Decimal("5")),
        MovContabil(2, 10, TipoMovimento.CREDITO, Decimal("2")),
    ]
    totais = contabil.totais_por_conta(movs)
    assert list(totais) == [10, 20]
    assert totais[10]["saldo"] == Decimal("3")
    assert totais[20]["creditos"] == Decimal("5")
