"""
Utilidades de parsing para valores digitados ou vindos de planilhas.

Este módulo interpreta as strings que chegam pela CLI e pelas
planilhas de importação: datas (ISO ou no formato brasileiro),
valores monetários (com vírgula ou ponto decimal), tipo do movimento
contábil (D/C) e status da ordem de compra. Valores impossíveis de
interpretar resultam em ``ArgumentoInvalidoError``; valores vazios
resultam em ``None``.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from suprimentos.domain.errors import ArgumentoInvalidoError
from suprimentos.domain.models import StatusOrdemCompra, TipoMovimento

_VALOR_RE = re.compile(r"^[-+]?[\d.,]+$")
_FORMATOS_DATA = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y", "%d/%m/%y")


def _vazio(txt: Any) -> bool:
    return txt is None or not str(txt).strip()


def parse_data(txt: Any) -> Optional[date]:
    """Interpreta uma data.

    Exemplos:
        "2025-01-31" → date(2025, 1, 31)
        "31/01/2025" → date(2025, 1, 31)
        "2025-01-31 10:00:00" → date(2025, 1, 31)
    """
    if _vazio(txt):
        return None
    if isinstance(txt, datetime):
        return txt.date()
    if isinstance(txt, date):
        return txt
    s = str(txt).strip()
    for fmt in _FORMATOS_DATA:
        try:
            return datetime.strptime(s[:10] if fmt == "%Y-%m-%d" else s, fmt).date()
        except ValueError:
            continue
    raise ArgumentoInvalidoError(f"Data inválida: {txt!r}")


def parse_valor(txt: Any) -> Optional[Decimal]:
    """Interpreta um valor monetário como ``Decimal``.

    Aceita separador decimal vírgula ou ponto e separador de milhar
    no formato brasileiro. O último separador encontrado é o decimal
    quando os dois aparecem.

    Exemplos:
        "1.234,56" → Decimal("1234.56")
        "1234.56"  → Decimal("1234.56")
        "40,00"    → Decimal("40.00")
        "R$ 5,50"  → Decimal("5.50")
    """
    if _vazio(txt):
        return None
    if isinstance(txt, Decimal):
        return txt
    if isinstance(txt, int):
        return Decimal(txt)
    s = str(txt).strip().replace("R$", "").replace(" ", "")
    if not _VALOR_RE.match(s):
        raise ArgumentoInvalidoError(f"Valor inválido: {txt!r}")
    if "," in s and "." in s:
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif "," in s:
        s = s.replace(",", ".")
    try:
        return Decimal(s)
    except InvalidOperation:
        raise ArgumentoInvalidoError(f"Valor inválido: {txt!r}") from None


def parse_tipo_movimento(txt: Any) -> TipoMovimento:
    """'D'/'débito' → DEBITO; 'C'/'crédito' → CREDITO."""
    s = "" if txt is None else str(txt).strip().upper()
    if s in {"D", "DEBITO", "DÉBITO"}:
        return TipoMovimento.DEBITO
    if s in {"C", "CREDITO", "CRÉDITO"}:
        return TipoMovimento.CREDITO
    raise ArgumentoInvalidoError("Tipo deve ser 'D' para débito ou 'C' para crédito")


def parse_status_ordem(txt: Any) -> StatusOrdemCompra:
    s = "" if txt is None else str(txt).strip().upper()
    try:
        return StatusOrdemCompra(s)
    except ValueError:
        validos = ", ".join(m.value for m in StatusOrdemCompra)
        raise ArgumentoInvalidoError(f"Status inválido: {txt!r} (use {validos})") from None


def parse_inteiro(txt: Any) -> Optional[int]:
    if _vazio(txt):
        return None
    try:
        return int(float(str(txt).strip().replace(",", ".")))
    except ValueError:
        raise ArgumentoInvalidoError(f"Número inválido: {txt!r}") from None
