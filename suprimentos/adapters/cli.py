# suprimentos/adapters/cli.py
"""
CLI do sistema de suprimentos (Typer).

Comandos principais:
- migrate                          -> aplica migrações e cria views
- params set/get/show              -> gerencia parâmetros globais
- produto status|painel            -> situação do estoque
- lote vencidos|proximos|validos   -> consulta lotes por validade
- lote baixar <id> <qtd>           -> baixa parcial de um lote
- ordem atrasadas|status           -> ordens de compra
- contabil saldo|lancamento        -> saldos e lançamentos contábeis
- rel validade|reposicao|atrasadas|razao -> relatórios (com --export)
- importar lotes|movimentos <arq>  -> importa planilhas XLSX/CSV
"""

from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from suprimentos.adapters.parsers import parse_data, parse_status_ordem, parse_valor
from suprimentos.adapters.planilha_loader import load_lotes, load_movimentos
from suprimentos.config import DB_PATH, DEFAULTS
from suprimentos.domain.errors import SuprimentosError
from suprimentos.domain.models import Lote, OrdemCompra
from suprimentos.domain.policies import dias_para_vencimento, status_lote
from suprimentos.infra import logger as log_config
from suprimentos.infra.migrations import apply_migrations
from suprimentos.infra.repositories import ParamsRepo
from suprimentos.infra.views import create_views
from suprimentos.usecases import contabil, lotes, ordens_compra, produtos
from suprimentos.usecases.parametros import CHAVES_PARAMS, carregar_params, resolver_hoje
from suprimentos.usecases.relatorios import (
    exportar_relatorio,
    relatorio_ordens_atrasadas,
    relatorio_razao,
    relatorio_reposicao,
    relatorio_validade,
)


app = typer.Typer(help="Suprimentos — CLI")
console = Console()

DB_OPTION = typer.Option(DB_PATH, "--db", help="Caminho do SQLite")
HOJE_OPTION = typer.Option(None, "--hoje", help="Data de referência (padrão: hoje)")


@app.callback()
def _global(
    log: bool = typer.Option(False, "--log", help="Grava logs em suprimentos/logs"),
):
    log_config.ENABLE_LOGGING = log


# -----------------------
# util
# -----------------------

def _print_json(obj) -> None:
    typer.echo(json.dumps(obj, ensure_ascii=False, indent=2, default=str))


def _fmt(val: Any) -> str:
    if val is None:
        return ""
    if isinstance(val, bool):
        return "sim" if val else "não"
    if isinstance(val, Decimal):
        return f"{val:,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    if isinstance(val, date):
        return val.strftime("%d/%m/%Y")
    return str(val)


def _display_table(data: Dict[str, Any] | List[Dict[str, Any]], title: str = "Resultado") -> None:
    """Exibe uma lista de dicionários (ou um único dicionário) em tabela Rich."""
    if not data:
        console.print(Panel("Nenhum dado encontrado", title=title, border_style="yellow"))
        return

    if isinstance(data, dict):
        table = Table(title=title, box=box.ROUNDED)
        table.add_column("Campo")
        table.add_column("Valor")
        for chave, valor in data.items():
            table.add_row(chave, _fmt(valor))
        console.print(table)
        return

    table = Table(title=title, box=box.ROUNDED)
    columns = list(data[0].keys())
    for column in columns:
        if column.lower() in ("quantidade", "valor", "saldo", "dias"):
            table.add_column(column, justify="right")
        elif column.lower().startswith("data") or column.lower() == "vencimento":
            table.add_column(column, justify="center")
        else:
            table.add_column(column)
    for row in data:
        table.add_row(*[_fmt(row.get(col)) for col in columns])
    console.print(table)


def _display_relatorio(res, title: str, export: Optional[str] = None) -> None:
    """Exibe ``(colunas, linhas, mensagem)`` e opcionalmente exporta."""
    columns, rows, msg = res
    if msg:
        console.print(Panel(msg, title=title, border_style="yellow"))
    else:
        table = Table(title=title, box=box.ROUNDED)
        for col in columns:
            table.add_column(col)
        for row in rows:
            table.add_row(*[_fmt(v) for v in row])
        console.print(table)
    if export:
        destino = exportar_relatorio(columns, rows, export)
        typer.echo(f">> Relatório exportado para: {destino}")


def _status_cor(status: str) -> str:
    cores = {
        "ZERADO": "bold red",
        "CRITICO": "bold red",
        "VENCIDO": "bold red",
        "BAIXO": "bold yellow",
        "PROXIMO_VENCIMENTO": "bold yellow",
        "EXCESSO": "bold magenta",
        "NORMAL": "bold green",
        "VALIDO": "bold green",
    }
    cor = cores.get(status)
    return f"[{cor}]{status}[/]" if cor else status


@contextmanager
def _tratando_erros():
    """Converte erros de domínio em mensagem amigável e exit code 1."""
    try:
        yield
    except SuprimentosError as e:
        console.print(Panel(str(e), title=type(e).__name__, border_style="red"))
        raise typer.Exit(code=1)


def _preparar(db_path: str) -> None:
    apply_migrations(db_path)
    create_views(db_path)


def _data(txt: Optional[str]) -> Optional[date]:
    return parse_data(txt) if txt else None


def _linhas_lotes(itens: List[Lote], hoje: date, janela: int) -> List[Dict[str, Any]]:
    return [
        {
            "id": l.id,
            "produto": l.id_produto,
            "ordem": l.id_ordem_compra,
            "vencimento": l.data_vencimento,
            "dias": dias_para_vencimento(l, hoje),
            "quantidade": l.quantidade,
            "situacao": _status_cor(status_lote(l, hoje, janela).value),
        }
        for l in itens
    ]


def _linhas_ordens(itens: List[OrdemCompra]) -> List[Dict[str, Any]]:
    return [
        {
            "id": o.id,
            "status": o.status.value,
            "valor": o.valor,
            "data_ordem": o.data_ordem,
            "data_prevista": o.data_prevista,
            "data_entrega": o.data_entrega,
        }
        for o in itens
    ]


# -----------------------
# comandos de infra
# -----------------------

@app.command("migrate")
def cmd_migrate(db_path: str = DB_OPTION):
    """Aplica migrações e recria as views auxiliares."""
    _preparar(db_path)
    typer.echo(f">> Migrações aplicadas e views criadas em: {db_path}")


params_app = typer.Typer(help="Gerenciar parâmetros globais (janela de vencimento e transições).")
app.add_typer(params_app, name="params")


@params_app.command("set")
def cmd_params_set(
    janela_vencimento_dias: Optional[int] = typer.Option(None, help="Dias da janela de vencimento (ex.: 30)"),
    transicoes_estritas: Optional[bool] = typer.Option(
        None, "--transicoes-estritas/--transicoes-permissivas", help="Política de transição de status"
    ),
    db_path: str = DB_OPTION,
):
    """Define parâmetros globais (apenas os informados são alterados)."""
    _preparar(db_path)
    items: List[tuple[str, str]] = []
    if janela_vencimento_dias is not None:
        if janela_vencimento_dias < 0:
            typer.echo("Janela de vencimento não pode ser negativa.")
            raise typer.Exit(code=1)
        items.append(("janela_vencimento_dias", str(janela_vencimento_dias)))
    if transicoes_estritas is not None:
        items.append(("transicoes_estritas", "1" if transicoes_estritas else "0"))
    if not items:
        typer.echo("Nada a alterar. Informe pelo menos um parâmetro.")
        raise typer.Exit(code=1)
    ParamsRepo(db_path).set_many(items)
    typer.echo(">> Parâmetros atualizados.")


@params_app.command("get")
def cmd_params_get(
    chave: str = typer.Argument(..., help="Ex.: janela_vencimento_dias | transicoes_estritas"),
    db_path: str = DB_OPTION,
):
    """Mostra um parâmetro específico."""
    _preparar(db_path)
    val = ParamsRepo(db_path).get(chave)
    typer.echo("(None)" if val is None else val)


@params_app.command("show")
def cmd_params_show(db_path: str = DB_OPTION):
    """Exibe os parâmetros efetivos (com fallback para defaults) em JSON."""
    _preparar(db_path)
    efetivos = carregar_params(db_path)
    out = {chave: getattr(efetivos, chave) for chave in CHAVES_PARAMS}
    out["_defaults"] = {chave: getattr(DEFAULTS, chave) for chave in CHAVES_PARAMS}
    out["_db"] = db_path
    _print_json(out)


# -----------------------
# produtos
# -----------------------

produto_app = typer.Typer(help="Situação do estoque por produto.")
app.add_typer(produto_app, name="produto")


@produto_app.command("status")
def cmd_produto_status(
    id_produto: int = typer.Argument(..., help="ID do produto"),
    db_path: str = DB_OPTION,
):
    """Classifica o estoque atual de um produto."""
    _preparar(db_path)
    with _tratando_erros():
        res = produtos.consultar_status_estoque(id_produto, db_path)
    res["status"] = _status_cor(res["status"])
    _display_table(res, title=f"Produto {id_produto}")


@produto_app.command("painel")
def cmd_produto_painel(db_path: str = DB_OPTION):
    """Todos os produtos com quantidade e status."""
    _preparar(db_path)
    linhas = produtos.painel_estoque(db_path)
    for r in linhas:
        r["status"] = _status_cor(r["status"])
        r.pop("descricao_status", None)
    _display_table(linhas, title="Painel de Estoque")


# -----------------------
# lotes
# -----------------------

lote_app = typer.Typer(help="Consulta e baixa de lotes.")
app.add_typer(lote_app, name="lote")


@lote_app.command("vencidos")
def cmd_lote_vencidos(hoje: Optional[str] = HOJE_OPTION, db_path: str = DB_OPTION):
    """Lotes com vencimento anterior à data de referência."""
    _preparar(db_path)
    with _tratando_erros():
        ref = resolver_hoje(_data(hoje))
        janela = carregar_params(db_path).janela_vencimento_dias
        itens = lotes.listar_lotes_vencidos(db_path, ref)
    _display_table(_linhas_lotes(itens, ref, janela), title="Lotes Vencidos")


@lote_app.command("proximos")
def cmd_lote_proximos(
    janela_dias: Optional[int] = typer.Option(None, "--janela", help="Dias (padrão: parâmetro global)"),
    hoje: Optional[str] = HOJE_OPTION,
    db_path: str = DB_OPTION,
):
    """Lotes que vencem dentro da janela."""
    _preparar(db_path)
    with _tratando_erros():
        ref = resolver_hoje(_data(hoje))
        janela = janela_dias if janela_dias is not None else carregar_params(db_path).janela_vencimento_dias
        itens = lotes.listar_lotes_proximos_vencimento(db_path, ref, janela)
    _display_table(_linhas_lotes(itens, ref, janela), title=f"Lotes a Vencer (Próximos {janela} dias)")


@lote_app.command("validos")
def cmd_lote_validos(hoje: Optional[str] = HOJE_OPTION, db_path: str = DB_OPTION):
    """Lotes não vencidos."""
    _preparar(db_path)
    with _tratando_erros():
        ref = resolver_hoje(_data(hoje))
        janela = carregar_params(db_path).janela_vencimento_dias
        itens = lotes.listar_lotes_validos(db_path, ref)
    _display_table(_linhas_lotes(itens, ref, janela), title="Lotes Válidos")


@lote_app.command("baixar")
def cmd_lote_baixar(
    id_lote: int = typer.Argument(..., help="ID do lote"),
    quantidade: int = typer.Argument(..., help="Quantidade a baixar"),
    db_path: str = DB_OPTION,
):
    """Baixa parcial de um lote."""
    _preparar(db_path)
    with _tratando_erros():
        lote = lotes.remover_quantidade(id_lote, quantidade, db_path)
    typer.echo(f">> Lote {lote.id}: saldo {lote.quantidade}")


# -----------------------
# ordens de compra
# -----------------------

ordem_app = typer.Typer(help="Ordens de compra.")
app.add_typer(ordem_app, name="ordem")


@ordem_app.command("atrasadas")
def cmd_ordem_atrasadas(hoje: Optional[str] = HOJE_OPTION, db_path: str = DB_OPTION):
    """Ordens não concluídas com entrega prevista vencida."""
    _preparar(db_path)
    with _tratando_erros():
        itens = ordens_compra.listar_ordens_em_atraso(db_path, _data(hoje))
    _display_table(_linhas_ordens(itens), title="Ordens em Atraso")


@ordem_app.command("status")
def cmd_ordem_status(
    id_ordem: int = typer.Argument(..., help="ID da ordem de compra"),
    novo_status: str = typer.Argument(..., help="PEND | ANDA | CONC"),
    entrega: Optional[str] = typer.Option(None, help="Data de entrega (ao concluir)"),
    db_path: str = DB_OPTION,
):
    """Altera o status de uma ordem de compra."""
    _preparar(db_path)
    with _tratando_erros():
        ordem = ordens_compra.alterar_status(
            id_ordem, parse_status_ordem(novo_status), db_path, data_entrega=_data(entrega)
        )
    typer.echo(f">> Ordem {ordem.id}: {ordem.status.value}")


# -----------------------
# contabilidade
# -----------------------

contabil_app = typer.Typer(help="Movimentação contábil.")
app.add_typer(contabil_app, name="contabil")


@contabil_app.command("saldo")
def cmd_contabil_saldo(
    id_plano_conta: int = typer.Argument(..., help="ID do plano de contas"),
    inicio: Optional[str] = typer.Option(None, help="Início do período"),
    fim: Optional[str] = typer.Option(None, help="Fim do período"),
    db_path: str = DB_OPTION,
):
    """Saldo (débitos - créditos) da conta, opcionalmente em um período."""
    _preparar(db_path)
    with _tratando_erros():
        if inicio or fim:
            valor = contabil.saldo_conta_periodo(id_plano_conta, _data(inicio), _data(fim), db_path)
        else:
            valor = contabil.saldo_conta(id_plano_conta, db_path)
    typer.echo(str(valor))


@contabil_app.command("lancamento")
def cmd_contabil_lancamento(
    debito: int = typer.Option(..., help="Conta debitada"),
    credito: int = typer.Option(..., help="Conta creditada"),
    valor: str = typer.Option(..., help="Valor (ex.: 1.234,56)"),
    data: Optional[str] = typer.Option(None, help="Data do lançamento"),
    ordem: Optional[int] = typer.Option(None, help="ID da ordem de compra"),
    db_path: str = DB_OPTION,
):
    """Cria um lançamento balanceado (um débito e um crédito)."""
    _preparar(db_path)
    with _tratando_erros():
        d, c = contabil.criar_lancamento_balanceado(
            debito, credito, parse_valor(valor), _data(data), ordem, db_path=db_path
        )
    typer.echo(f">> Lançamento {d.numero_lancamento} criado (movimentos {d.id} e {c.id}).")


# -----------------------
# relatórios
# -----------------------

rel_app = typer.Typer(help="Relatórios de suprimentos")
app.add_typer(rel_app, name="rel")

EXPORT_OPTION = typer.Option(None, "--export", help="Arquivo .csv ou .xlsx de saída")


@rel_app.command("validade")
def rel_validade(
    janela_dias: Optional[int] = typer.Option(None, "--janela", help="Dias (padrão: parâmetro global)"),
    todos: bool = typer.Option(False, "--todos", help="Inclui lotes válidos"),
    hoje: Optional[str] = HOJE_OPTION,
    export: Optional[str] = EXPORT_OPTION,
    db_path: str = DB_OPTION,
):
    """Lotes vencidos e próximos do vencimento."""
    with _tratando_erros():
        res = relatorio_validade(janela_dias, todos, db_path, _data(hoje))
        _display_relatorio(res, "Validade de Lotes", export)


@rel_app.command("reposicao")
def rel_reposicao(export: Optional[str] = EXPORT_OPTION, db_path: str = DB_OPTION):
    """Produtos que precisam de reposição."""
    with _tratando_erros():
        _display_relatorio(relatorio_reposicao(db_path), "Reposição de Estoque", export)


@rel_app.command("atrasadas")
def rel_atrasadas(
    hoje: Optional[str] = HOJE_OPTION,
    export: Optional[str] = EXPORT_OPTION,
    db_path: str = DB_OPTION,
):
    """Ordens de compra em atraso."""
    with _tratando_erros():
        _display_relatorio(relatorio_ordens_atrasadas(db_path, _data(hoje)), "Ordens em Atraso", export)


@rel_app.command("razao")
def rel_razao(
    inicio: str = typer.Option(..., help="Início do período"),
    fim: str = typer.Option(..., help="Fim do período"),
    export: Optional[str] = EXPORT_OPTION,
    db_path: str = DB_OPTION,
):
    """Débitos, créditos e saldo por conta no período."""
    with _tratando_erros():
        res = relatorio_razao(_data(inicio), _data(fim), db_path)
        _display_relatorio(res, f"Razão ({inicio} a {fim})", export)


# -----------------------
# importação
# -----------------------

importar_app = typer.Typer(help="Importação de planilhas (XLSX ou CSV).")
app.add_typer(importar_app, name="importar")


@importar_app.command("lotes")
def cmd_importar_lotes(
    path: str = typer.Argument(..., help="Planilha de LOTES recebidos"),
    hoje: Optional[str] = HOJE_OPTION,
    db_path: str = DB_OPTION,
):
    """Registra os lotes de uma planilha."""
    _preparar(db_path)
    with _tratando_erros():
        gravados = lotes.importar_lotes(load_lotes(path), db_path, _data(hoje))
    log_config.log_file_operation("import_lotes", path, len(gravados))
    typer.echo(f">> {len(gravados)} lotes importados.")


@importar_app.command("movimentos")
def cmd_importar_movimentos(
    path: str = typer.Argument(..., help="Planilha de MOVIMENTOS contábeis"),
    db_path: str = DB_OPTION,
):
    """Registra os movimentos contábeis de uma planilha."""
    _preparar(db_path)
    with _tratando_erros():
        gravados = contabil.importar_movimentos(load_movimentos(path), db_path)
    log_config.log_file_operation("import_movimentos", path, len(gravados))
    typer.echo(f">> {len(gravados)} movimentos importados.")


def main():
    app()


if __name__ == "__main__":
    main()
