import json
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

from typer.testing import CliRunner

from suprimentos.adapters.cli import app
from suprimentos.domain.models import Lote, OrdemCompra, Produto, StatusOrdemCompra
from suprimentos.usecases import lotes, ordens_compra, produtos

runner = CliRunner()

HOJE = date(2025, 6, 15)


def _seed(db_path: str):
    p = produtos.cadastrar_produto(
        Produto(nome="Luva", descricao="Luva", id_unidade_medida=1, estoque_max=100, estoque_min=10, ponto_pedido=5),
        db_path,
    )
    o = ordens_compra.criar_ordem(
        OrdemCompra(valor=Decimal("100"), data_prevista=HOJE - timedelta(days=1), data_ordem=HOJE - timedelta(days=5)),
        db_path,
        hoje=HOJE,
    )
    lote = lotes.registrar_lote(Lote(o.id, p.id, HOJE + timedelta(days=3), 8), db_path, hoje=HOJE)
    return p, o, lote


def test_cli_migrate_and_params_show(tmp_path: Path):
    db_path = tmp_path / "suprimentos_test.sqlite"
    result = runner.invoke(app, ["migrate", "--db", str(db_path)])
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["params", "show", "--db", str(db_path)])
    assert result.exit_code == 0, result.output
    data = json.loads(result.stdout)
    assert data["janela_vencimento_dias"] == 30
    assert data["transicoes_estritas"] is False
    assert data["_defaults"]["janela_vencimento_dias"] == 30


def test_cli_params_set_and_get(tmp_path: Path):
    db_path = str(tmp_path / "suprimentos_test.sqlite")
    result = runner.invoke(
        app,
        ["params", "set", "--db", db_path, "--janela-vencimento-dias", "15", "--transicoes-estritas"],
    )
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["params", "get", "janela_vencimento_dias", "--db", db_path])
    assert result.exit_code == 0
    assert result.stdout.strip() == "15"

    result = runner.invoke(app, ["params", "show", "--db", db_path])
    assert json.loads(result.stdout)["transicoes_estritas"] is True


def test_cli_params_set_sem_valores(tmp_path: Path):
    result = runner.invoke(app, ["params", "set", "--db", str(tmp_path / "x.sqlite")])
    assert result.exit_code == 1


def test_cli_produto_status(db_path):
    p, _, _ = _seed(db_path)
    result = runner.invoke(app, ["produto", "status", str(p.id), "--db", db_path])
    assert result.exit_code == 0, result.output
    assert "BAIXO" in result.output

    result = runner.invoke(app, ["produto", "status", "999", "--db", db_path])
    assert result.exit_code == 1
    assert "não encontrado" in result.output


def test_cli_lotes_por_validade(db_path):
    _seed(db_path)
    result = runner.invoke(app, ["lote", "proximos", "--hoje", "2025-06-15", "--db", db_path])
    assert result.exit_code == 0, result.output
    assert "PROXIMO_VENCIMENTO" in result.output

    result = runner.invoke(app, ["lote", "vencidos", "--hoje", "30/06/2025", "--db", db_path])
    assert result.exit_code == 0, result.output
    assert "VENCIDO" in result.output

    result = runner.invoke(app, ["lote", "vencidos", "--hoje", "2025-06-15", "--db", db_path])
    assert "Nenhum dado encontrado" in result.output


def test_cli_lote_baixar(db_path):
    _, _, lote = _seed(db_path)
    result = runner.invoke(app, ["lote", "baixar", str(lote.id), "5", "--db", db_path])
    assert result.exit_code == 0, result.output
    assert "saldo 3" in result.output

    result = runner.invoke(app, ["lote", "baixar", str(lote.id), "5", "--db", db_path])
    assert result.exit_code == 1
    assert "insuficiente" in result.output


def test_cli_ordem_status_e_atrasadas(db_path):
    _, o, _ = _seed(db_path)
    result = runner.invoke(app, ["ordem", "atrasadas", "--hoje", "2025-06-15", "--db", db_path])
    assert result.exit_code == 0, result.output
    assert "PEND" in result.output

    result = runner.invoke(app, ["ordem", "status", str(o.id), "conc", "--entrega", "2025-06-14", "--db", db_path])
    assert result.exit_code == 0, result.output
    assert ordens_compra.obter_ordem(o.id, db_path).status == StatusOrdemCompra.CONC

    result = runner.invoke(app, ["ordem", "status", str(o.id), "PEND", "--db", db_path])
    assert result.exit_code == 1

    result = runner.invoke(app, ["ordem", "status", str(o.id), "XYZ", "--db", db_path])
    assert result.exit_code == 1


def test_cli_contabil(db_path):
    result = runner.invoke(
        app,
        ["contabil", "lancamento", "--debito", "1", "--credito", "2", "--valor", "1.234,56",
         "--data", "2025-03-01", "--db", db_path],
    )
    assert result.exit_code == 0, result.output

    result = runner.invoke(app, ["contabil", "saldo", "1", "--db", db_path])
    assert result.stdout.strip() == "1234.56"
    result = runner.invoke(app, ["contabil", "saldo", "2", "--db", db_path])
    assert result.stdout.strip() == "-1234.56"
    result = runner.invoke(
        app, ["contabil", "saldo", "1", "--inicio", "2025-04-01", "--fim", "2025-04-30", "--db", db_path]
    )
    assert result.stdout.strip() == "0"

    result = runner.invoke(
        app, ["contabil", "saldo", "1", "--inicio", "2025-04-30", "--fim", "2025-04-01", "--db", db_path]
    )
    assert result.exit_code == 1


def test_cli_rel_com_exportacao(db_path, tmp_path: Path):
    _seed(db_path)
    destino = tmp_path / "validade.csv"
    result = runner.invoke(
        app, ["rel", "validade", "--hoje", "2025-06-15", "--export", str(destino), "--db", db_path]
    )
    assert result.exit_code == 0, result.output
    assert destino.exists()

    for args in (["rel", "reposicao"], ["rel", "atrasadas", "--hoje", "2025-06-15"],
                 ["rel", "razao", "--inicio", "2025-01-01", "--fim", "2025-12-31"]):
        result = runner.invoke(app, args + ["--db", db_path])
        assert result.exit_code == 0, result.output


def test_cli_importar(db_path, tmp_path: Path):
    _, o, _ = _seed(db_path)
    planilha = tmp_path / "lotes.csv"
    planilha.write_text(
        "ordem;produto;validade;quantidade\n"
        f"{o.id};1;31/12/2099;10\n"
        f"{o.id};1;2099-06-30;5\n",
        encoding="utf-8",
    )
    result = runner.invoke(app, ["importar", "lotes", str(planilha), "--db", db_path])
    assert result.exit_code == 0, result.output
    assert "2 lotes importados" in result.output
    assert lotes.total_quantidade_por_ordem(o.id, db_path) == 23

    movs = tmp_path / "movs.csv"
    movs.write_text("lancamento,conta,data,tipo,valor\n1,10,2025-01-01,D,10.00\n1,20,2025-01-01,C,10.00\n")
    result = runner.invoke(app, ["importar", "movimentos", str(movs), "--db", db_path])
    assert result.exit_code == 0, result.output
    assert "2 movimentos importados" in result.output

    ruim = tmp_path / "ruim.csv"
    ruim.write_text("ordem,produto,validade,quantidade\n1,1,,1\n")
    result = runner.invoke(app, ["importar", "lotes", str(ruim), "--db", db_path])
    assert result.exit_code == 1
    assert "Linha 2" in result.output

    parcial = tmp_path / "parcial.csv"
    parcial.write_text(f"ordem,produto,validade,quantidade\n{o.id},1,2099-01-01,4\n999,1,2099-01-01,4\n")
    result = runner.invoke(app, ["importar", "lotes", str(parcial), "--db", db_path])
    assert result.exit_code == 1
    assert lotes.total_quantidade_por_ordem(o.id, db_path) == 23
