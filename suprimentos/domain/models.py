# suprimentos/domain/models.py
"""
Modelos (dataclasses) e enumerações do domínio.

Observação importante:
- Os repositórios devolvem estas dataclasses já convertidas
  (datas como ``date`` e valores monetários como ``Decimal``).
- As políticas do domínio só leem os registros; nenhuma delas
  altera os objetos recebidos.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class StatusEstoque(str, Enum):
    """Classificação da saúde do estoque de um produto."""
    ZERADO = "ZERADO"
    CRITICO = "CRITICO"
    BAIXO = "BAIXO"
    NORMAL = "NORMAL"
    EXCESSO = "EXCESSO"
    INDEFINIDO = "INDEFINIDO"

    @property
    def descricao(self) -> str:
        return _DESCRICOES_ESTOQUE[self]


_DESCRICOES_ESTOQUE = {
    StatusEstoque.ZERADO: "Estoque Zerado",
    StatusEstoque.CRITICO: "Estoque Crítico",
    StatusEstoque.BAIXO: "Estoque Baixo",
    StatusEstoque.NORMAL: "Estoque Normal",
    StatusEstoque.EXCESSO: "Estoque em Excesso",
    StatusEstoque.INDEFINIDO: "Status Indefinido",
}


class StatusLote(str, Enum):
    """Situação de validade de um lote."""
    VENCIDO = "VENCIDO"
    PROXIMO_VENCIMENTO = "PROXIMO_VENCIMENTO"
    VALIDO = "VALIDO"

    @property
    def descricao(self) -> str:
        return {
            StatusLote.VENCIDO: "Vencido",
            StatusLote.PROXIMO_VENCIMENTO: "Próximo do Vencimento",
            StatusLote.VALIDO: "Válido",
        }[self]


class StatusOrdemCompra(str, Enum):
    """Status da ordem de compra (tags do contrato do sistema chamador)."""
    PEND = "PEND"  # pendente
    ANDA = "ANDA"  # em andamento
    CONC = "CONC"  # concluída


class TipoMovimento(str, Enum):
    """Natureza do lançamento contábil."""
    DEBITO = "D"
    CREDITO = "C"


@dataclass
class Produto:
    """Cadastro de produto com os limiares de estoque."""
    nome: str
    descricao: str
    id_unidade_medida: int
    estoque_max: Optional[int] = None    # >= 1
    estoque_min: Optional[int] = None    # >= 0
    ponto_pedido: Optional[int] = None   # >= 0
    id_almoxarifado: Optional[int] = None
    cod_barras: Optional[str] = None
    temp_ideal: Optional[Decimal] = None  # -99.9 .. 99.9, uma casa decimal
    id: Optional[int] = None


@dataclass
class OrdemCompra:
    """Ordem de compra; recebe zero ou mais lotes."""
    valor: Decimal
    data_prevista: date
    data_ordem: date
    status: StatusOrdemCompra = StatusOrdemCompra.PEND
    data_entrega: Optional[date] = None
    id: Optional[int] = None


@dataclass
class ItemOrdemCompra:
    """Item (produto x quantidade x valor unitário) de uma ordem de compra."""
    id_ordem_compra: int
    id_produto: int
    quantidade: int
    valor: Decimal
    data_vencimento: Optional[date] = None
    id: Optional[int] = None


@dataclass
class Lote:
    """Recebimento de um produto, com fabricação, vencimento e quantidade."""
    id_ordem_compra: int
    id_produto: int
    data_vencimento: Optional[date]
    quantidade: int = 0
    data_fabricacao: Optional[date] = None
    id: Optional[int] = None


@dataclass
class MovContabil:
    """Lançamento contábil; o sinal vem de ``tipo``, ``valor`` é sempre >= 0."""
    numero_lancamento: int
    id_plano_conta: int
    tipo: TipoMovimento
    valor: Decimal
    data_lancamento: Optional[date] = None
    id_ordem_compra: Optional[int] = None
    id: Optional[int] = None


@dataclass
class Params:
    """Parâmetros globais (armazenados na tabela `params` como chave/valor)."""
    janela_vencimento_dias: int = 30
    transicoes_estritas: bool = False
