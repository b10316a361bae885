# suprimentos/usecases/parametros.py
"""
Leitura dos parâmetros globais e da data de referência.

Os casos de uso são a borda onde "hoje" é resolvido: se o chamador não
informa a data, usa-se ``date.today()`` e o valor segue explícito para
as políticas do domínio.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from suprimentos.config import DB_PATH, DEFAULTS
from suprimentos.domain.errors import ArgumentoInvalidoError
from suprimentos.domain.models import Params
from suprimentos.infra.repositories import ParamsRepo


CHAVES_PARAMS = ("janela_vencimento_dias", "transicoes_estritas")


def carregar_params(db_path: str = DB_PATH) -> Params:
    """Carrega parâmetros globais, com fallback para DEFAULTS."""
    repo = ParamsRepo(db_path)
    return Params(
        janela_vencimento_dias=repo.get_int("janela_vencimento_dias", DEFAULTS.janela_vencimento_dias),
        transicoes_estritas=repo.get_bool("transicoes_estritas", DEFAULTS.transicoes_estritas),
    )


def resolver_hoje(hoje: Optional[date] = None) -> date:
    return hoje if hoje is not None else date.today()


def exigir_id(valor: Optional[int], nome: str = "ID") -> int:
    """Falha cedo quando um identificador obrigatório não foi informado."""
    if valor is None:
        raise ArgumentoInvalidoError(f"{nome} não pode ser nulo")
    return valor
