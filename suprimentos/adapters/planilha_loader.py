# suprimentos/adapters/planilha_loader.py
"""
Loaders para planilhas (XLSX ou CSV) de LOTES recebidos e de
MOVIMENTOS contábeis.

Essas funções:
- leem a planilha usando pandas (tudo como string, para preservar formatos);
- normalizam cabeçalhos (acentos, variações, sinônimos);
- convertem cada linha para a dataclass do domínio.

Observações:
- Datas aceitam ISO ou DD/MM/AAAA; valores aceitam vírgula decimal.
- Linhas totalmente vazias são ignoradas.
- Uma linha inválida levanta ``ArgumentoInvalidoError`` indicando o número
  da linha na planilha (cabeçalho = linha 1).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from suprimentos.adapters.parsers import (
    parse_data,
    parse_inteiro,
    parse_tipo_movimento,
    parse_valor,
)
from suprimentos.domain.errors import ArgumentoInvalidoError
from suprimentos.domain.models import Lote, MovContabil


# ---------------------------
# utilitários de normalização
# ---------------------------

def _slug(s: str) -> str:
    """Normaliza cabeçalhos: minúsculas, sem acentos, sem não-alfanumérico."""
    if s is None:
        return ""
    s = str(s).strip().lower()
    acentos = dict(zip("áàâãäéèêëíìîïóòôõöúùûüç", "aaaaaeeeeiiiiooooouuuuc"))
    s = "".join(acentos.get(ch, ch) for ch in s)
    s = re.sub(r"[^a-z0-9]+", " ", s)
    return re.sub(r"\s+", " ", s).strip()


_ALIASES = {
    # lotes
    "ordem": "id_ordem_compra",
    "ordem compra": "id_ordem_compra",
    "ordem de compra": "id_ordem_compra",
    "id ordem compra": "id_ordem_compra",
    "id ordcomp": "id_ordem_compra",

    "produto": "id_produto",
    "id produto": "id_produto",
    "cod produto": "id_produto",

    "fabricacao": "data_fabricacao",
    "data fabricacao": "data_fabricacao",
    "data de fabricacao": "data_fabricacao",

    "validade": "data_vencimento",
    "vencimento": "data_vencimento",
    "data validade": "data_vencimento",
    "data vencimento": "data_vencimento",
    "data de vencimento": "data_vencimento",

    "quantidade": "quantidade",
    "qtd": "quantidade",
    "qtde": "quantidade",
    "qntd": "quantidade",

    # movimentos
    "lancamento": "numero_lancamento",
    "numero lancamento": "numero_lancamento",
    "n lancamento": "numero_lancamento",

    "conta": "id_plano_conta",
    "plano conta": "id_plano_conta",
    "plano de contas": "id_plano_conta",
    "id plano conta": "id_plano_conta",

    "data": "data_lancamento",
    "data lancamento": "data_lancamento",
    "data de lancamento": "data_lancamento",

    "tipo": "tipo",
    "d c": "tipo",
    "natureza": "tipo",

    "valor": "valor",
    "montante": "valor",
}


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Renomeia colunas com base em sinônimos/variações."""
    new_cols = {}
    for col in df.columns:
        key = _slug(col)
        new_cols[col] = _ALIASES.get(key, key.replace(" ", "_"))
    return df.rename(columns=new_cols)


def _read(path: str) -> pd.DataFrame:
    ext = Path(path).suffix.lower()
    if ext == ".csv":
        with open(path, "r", encoding="utf-8-sig") as f:
            cabecalho = f.readline()
        # planilhas exportadas em pt-BR usam ';' (a vírgula é o decimal)
        sep = ";" if ";" in cabecalho else ","
        df = pd.read_csv(path, dtype="string", sep=sep, encoding="utf-8-sig", skip_blank_lines=False)
    elif ext in (".xlsx", ".xls"):
        df = pd.read_excel(path, dtype="string")
    else:
        raise ArgumentoInvalidoError(f"Formato de planilha não suportado: {ext or path}")
    df = _normalize_columns(df)
    # o índice original é a linha da planilha menos 2 (cabeçalho e base 0)
    return df.dropna(how="all")


def _safe_get(row: Dict[str, Any], key: str) -> Optional[str]:
    val = row.get(key)
    if val is None or pd.isna(val):
        return None
    s = str(val).strip()
    return s or None


def _required(value: Any, campo: str, linha: int) -> Any:
    if value is None:
        raise ArgumentoInvalidoError(f"Linha {linha}: campo '{campo}' é obrigatório")
    return value


# ---------------------------
# loaders públicos
# ---------------------------

def load_lotes(path: str) -> List[Lote]:
    """Lê a planilha de LOTES recebidos.

    Colunas esperadas (com sinônimos): id_ordem_compra, id_produto,
    data_fabricacao, data_vencimento, quantidade.
    """
    df = _read(path)
    out: List[Lote] = []
    for idx, row in df.iterrows():
        linha = int(idx) + 2
        r = row.to_dict()
        try:
            out.append(
                Lote(
                    id_ordem_compra=_required(parse_inteiro(_safe_get(r, "id_ordem_compra")), "id_ordem_compra", linha),
                    id_produto=_required(parse_inteiro(_safe_get(r, "id_produto")), "id_produto", linha),
                    data_fabricacao=parse_data(_safe_get(r, "data_fabricacao")),
                    data_vencimento=_required(parse_data(_safe_get(r, "data_vencimento")), "data_vencimento", linha),
                    quantidade=parse_inteiro(_safe_get(r, "quantidade")) or 0,
                )
            )
        except ArgumentoInvalidoError as e:
            if str(e).startswith("Linha "):
                raise
            raise ArgumentoInvalidoError(f"Linha {linha}: {e}") from e
    return out


def load_movimentos(path: str) -> List[MovContabil]:
    """Lê a planilha de MOVIMENTOS contábeis.

    Colunas esperadas (com sinônimos): numero_lancamento, id_plano_conta,
    id_ordem_compra (opcional), data_lancamento, tipo (D/C), valor.
    """
    df = _read(path)
    out: List[MovContabil] = []
    for idx, row in df.iterrows():
        linha = int(idx) + 2
        r = row.to_dict()
        try:
            out.append(
                MovContabil(
                    numero_lancamento=_required(parse_inteiro(_safe_get(r, "numero_lancamento")), "numero_lancamento", linha),
                    id_plano_conta=_required(parse_inteiro(_safe_get(r, "id_plano_conta")), "id_plano_conta", linha),
                    id_ordem_compra=parse_inteiro(_safe_get(r, "id_ordem_compra")),
                    data_lancamento=parse_data(_safe_get(r, "data_lancamento")),
                    tipo=parse_tipo_movimento(_safe_get(r, "tipo")),
                    valor=_required(parse_valor(_safe_get(r, "valor")), "valor", linha),
                )
            )
        except ArgumentoInvalidoError as e:
            if str(e).startswith("Linha "):
                raise
            raise ArgumentoInvalidoError(f"Linha {linha}: {e}") from e
    return out
