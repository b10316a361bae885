# suprimentos/usecases/contabil.py
"""
UC: lançamentos contábeis e saldos por conta.

Movimentos são gravados uma única vez e não são alterados. O saldo de
uma conta é débitos menos créditos (``suprimentos.domain.formulas.saldo``).
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from suprimentos.config import DB_PATH
from suprimentos.domain.errors import ArgumentoInvalidoError, NaoEncontradoError
from suprimentos.domain.formulas import (
    filtrar_periodo,
    lancamento_balanceado,
    saldo,
    total_creditos,
    total_debitos,
)
from suprimentos.domain.models import MovContabil, TipoMovimento
from suprimentos.infra.logger import log_movimento, log_transaction
from suprimentos.infra.repositories import MovContabilRepo, OrdemCompraRepo
from suprimentos.usecases.parametros import exigir_id, resolver_hoje


def validar_movimento(mov: MovContabil, db_path: str) -> None:
    if mov.numero_lancamento is None:
        raise ArgumentoInvalidoError("Número do lançamento é obrigatório")
    exigir_id(mov.id_plano_conta, "ID do plano de contas")
    if mov.tipo is None:
        raise ArgumentoInvalidoError("Tipo deve ser 'D' para débito ou 'C' para crédito")
    if mov.valor is None or Decimal(mov.valor) <= 0:
        raise ArgumentoInvalidoError("Valor deve ser positivo")
    if mov.data_lancamento is None:
        raise ArgumentoInvalidoError("Data de lançamento é obrigatória")
    if mov.id_ordem_compra is not None and OrdemCompraRepo(db_path).get(mov.id_ordem_compra) is None:
        raise NaoEncontradoError(f"Ordem de compra não encontrada com ID: {mov.id_ordem_compra}")


def registrar_movimento(mov: MovContabil, db_path: str = DB_PATH) -> MovContabil:
    if mov.id is not None:
        raise ArgumentoInvalidoError("ID deve ser nulo para criação de nova movimentação")
    try:
        validar_movimento(mov, db_path)
        mov.id = MovContabilRepo(db_path).insert(mov)
    except Exception as e:
        log_transaction("registrar_movimento", {"numero_lancamento": mov.numero_lancamento}, error=str(e))
        raise
    log_movimento("insert", mov.numero_lancamento, mov.id_plano_conta, tipo=mov.tipo.value, valor=str(mov.valor))
    return mov


def criar_lancamento_balanceado(
    conta_debito: int,
    conta_credito: int,
    valor: Decimal,
    data_lancamento: Optional[date] = None,
    id_ordem_compra: Optional[int] = None,
    numero_lancamento: Optional[int] = None,
    db_path: str = DB_PATH,
) -> Tuple[MovContabil, MovContabil]:
    """Grava um débito e um crédito de mesmo valor sob o mesmo número de lançamento.

    Sem ``numero_lancamento``, usa o próximo número livre; sem
    ``data_lancamento``, a data de hoje. As duas pernas são gravadas na
    mesma transação.
    """
    data_lancamento = resolver_hoje(data_lancamento)
    repo = MovContabilRepo(db_path)
    if numero_lancamento is None:
        numero_lancamento = repo.next_numero_lancamento()
    comum = dict(
        numero_lancamento=numero_lancamento,
        valor=valor,
        data_lancamento=data_lancamento,
        id_ordem_compra=id_ordem_compra,
    )
    debito = MovContabil(id_plano_conta=conta_debito, tipo=TipoMovimento.DEBITO, **comum)
    credito = MovContabil(id_plano_conta=conta_credito, tipo=TipoMovimento.CREDITO, **comum)
    try:
        validar_movimento(debito, db_path)
        validar_movimento(credito, db_path)
        debito.id, credito.id = repo.insert_many([debito, credito])
    except Exception as e:
        log_transaction("criar_lancamento_balanceado", {"numero_lancamento": numero_lancamento}, error=str(e))
        raise
    log_movimento(
        "lancamento",
        numero_lancamento,
        conta_debito=conta_debito,
        conta_credito=conta_credito,
        valor=str(valor),
    )
    return debito, credito


def obter_movimento(id_mov: int, db_path: str = DB_PATH) -> MovContabil:
    exigir_id(id_mov, "ID da movimentação")
    mov = MovContabilRepo(db_path).get(id_mov)
    if mov is None:
        raise NaoEncontradoError(f"Movimentação contábil não encontrada com ID: {id_mov}")
    return mov


def saldo_conta(id_plano_conta: int, db_path: str = DB_PATH) -> Decimal:
    exigir_id(id_plano_conta, "ID do plano de contas")
    return saldo(MovContabilRepo(db_path).find_by_plano_conta(id_plano_conta))


def saldo_conta_periodo(id_plano_conta: int, inicio: date, fim: date, db_path: str = DB_PATH) -> Decimal:
    exigir_id(id_plano_conta, "ID do plano de contas")
    movs = MovContabilRepo(db_path).find_by_plano_conta(id_plano_conta)
    return saldo(filtrar_periodo(movs, inicio, fim))


def relatorio_por_periodo(inicio: date, fim: date, db_path: str = DB_PATH) -> List[MovContabil]:
    """Movimentos de todas as contas com data dentro de ``[inicio, fim]``."""
    return filtrar_periodo(MovContabilRepo(db_path).get_all(), inicio, fim)


def listar_por_tipo(tipo: TipoMovimento, db_path: str = DB_PATH) -> List[MovContabil]:
    if tipo is None:
        raise ArgumentoInvalidoError("Tipo não pode ser nulo")
    return MovContabilRepo(db_path).find_by_tipo(tipo)


def listar_por_ordem(id_ordem: int, db_path: str = DB_PATH) -> List[MovContabil]:
    exigir_id(id_ordem, "ID da ordem de compra")
    return MovContabilRepo(db_path).find_by_ordem(id_ordem)


def lancamento_esta_balanceado(numero_lancamento: int, db_path: str = DB_PATH) -> bool:
    movs = MovContabilRepo(db_path).find_by_numero(numero_lancamento)
    if not movs:
        raise NaoEncontradoError(f"Lançamento não encontrado: {numero_lancamento}")
    return lancamento_balanceado(movs)


def totais_por_conta(movimentos: List[MovContabil]) -> Dict[int, Dict[str, Decimal]]:
    """Agrupa débitos, créditos e saldo por ``id_plano_conta``."""
    por_conta: Dict[int, List[MovContabil]] = {}
    for m in movimentos:
        por_conta.setdefault(m.id_plano_conta, []).append(m)
    return {
        conta: {
            "debitos": total_debitos(movs),
            "creditos": total_creditos(movs),
            "saldo": saldo(movs),
        }
        for conta, movs in sorted(por_conta.items())
    }


def importar_movimentos(movimentos: List[MovContabil], db_path: str = DB_PATH) -> List[MovContabil]:
    """Grava movimentos vindos de planilha numa única transação."""
    for m in movimentos:
        validar_movimento(m, db_path)
    ids = MovContabilRepo(db_path).insert_many(movimentos)
    for m, id_mov in zip(movimentos, ids):
        m.id = id_mov
    log_movimento("importacao", None, quantidade=len(movimentos))
    return movimentos
