# suprimentos/usecases/produtos.py
"""
UC: cadastro de produtos e consulta da situação do estoque.

A quantidade atual de um produto é a soma das quantidades dos seus
lotes; a classificação usa ``status_estoque`` do domínio.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from suprimentos.config import DB_PATH
from suprimentos.domain.errors import ArgumentoInvalidoError, NaoEncontradoError
from suprimentos.domain.formulas import faixa_estoque
from suprimentos.domain.models import Produto
from suprimentos.domain.policies import precisa_reposicao, status_estoque
from suprimentos.infra.logger import log_database_operation, log_system_event, log_transaction
from suprimentos.infra.repositories import ProdutoRepo
from suprimentos.usecases.parametros import exigir_id


TEMP_LIMITE = Decimal("99.9")


def validar_produto(p: Produto) -> None:
    if not (p.nome or "").strip():
        raise ArgumentoInvalidoError("Nome do produto é obrigatório")
    if len(p.nome) > 50:
        raise ArgumentoInvalidoError("Nome deve ter no máximo 50 caracteres")
    if not (p.descricao or "").strip():
        raise ArgumentoInvalidoError("Descrição do produto é obrigatória")
    if len(p.descricao) > 250:
        raise ArgumentoInvalidoError("Descrição deve ter no máximo 250 caracteres")
    if p.id_unidade_medida is None:
        raise ArgumentoInvalidoError("ID da unidade de medida é obrigatório")
    if p.cod_barras is not None and len(p.cod_barras) > 250:
        raise ArgumentoInvalidoError("Código de barras deve ter no máximo 250 caracteres")
    if p.estoque_max is None or p.estoque_max < 1:
        raise ArgumentoInvalidoError("Estoque máximo deve ser maior que zero")
    if p.estoque_min is None or p.estoque_min < 0:
        raise ArgumentoInvalidoError("Estoque mínimo deve ser maior ou igual a zero")
    if p.ponto_pedido is None or p.ponto_pedido < 0:
        raise ArgumentoInvalidoError("Ponto de pedido deve ser maior ou igual a zero")
    if p.temp_ideal is not None:
        t = Decimal(p.temp_ideal)
        if not (-TEMP_LIMITE <= t <= TEMP_LIMITE):
            raise ArgumentoInvalidoError("Temperatura ideal deve estar entre -99.9°C e 99.9°C")
        if t.as_tuple().exponent < -1:
            raise ArgumentoInvalidoError("Temperatura deve ter no máximo 1 casa decimal")


def cadastrar_produto(produto: Produto, db_path: str = DB_PATH) -> Produto:
    """Valida e grava um novo produto; devolve o produto com ``id``."""
    if produto is None:
        raise ArgumentoInvalidoError("Produto não pode ser nulo")
    if produto.id is not None:
        raise ArgumentoInvalidoError("ID deve ser nulo para criação de novo produto")
    validar_produto(produto)
    produto.id = ProdutoRepo(db_path).insert(produto)
    log_database_operation("produto", "INSERT", 1, id=produto.id, nome=produto.nome)
    return produto


def atualizar_produto(produto: Produto, db_path: str = DB_PATH) -> Produto:
    exigir_id(produto.id, "ID do produto")
    validar_produto(produto)
    if ProdutoRepo(db_path).update(produto) == 0:
        raise NaoEncontradoError(f"Produto não encontrado com ID: {produto.id}")
    log_database_operation("produto", "UPDATE", 1, id=produto.id)
    return produto


def obter_produto(id_produto: int, db_path: str = DB_PATH) -> Produto:
    exigir_id(id_produto, "ID do produto")
    p = ProdutoRepo(db_path).get(id_produto)
    if p is None:
        raise NaoEncontradoError(f"Produto não encontrado com ID: {id_produto}")
    return p


def buscar_produtos(termo: str, db_path: str = DB_PATH) -> List[Produto]:
    """Busca por substring (sem diferenciar maiúsculas) no nome ou na descrição."""
    if not (termo or "").strip():
        raise ArgumentoInvalidoError("Termo de busca não pode ser vazio")
    repo = ProdutoRepo(db_path)
    vistos: Dict[int, Produto] = {p.id: p for p in repo.search_nome(termo)}
    for p in repo.search_descricao(termo):
        vistos.setdefault(p.id, p)
    return sorted(vistos.values(), key=lambda p: p.nome)


def _linha_status(p: Produto, quantidade) -> Dict[str, Any]:
    st = status_estoque(p, quantidade)
    return {
        "id": p.id,
        "nome": p.nome,
        "quantidade": quantidade,
        "estoque_min": p.estoque_min,
        "estoque_max": p.estoque_max,
        "ponto_pedido": p.ponto_pedido,
        "faixa": faixa_estoque(p),
        "status": st.value,
        "descricao_status": st.descricao,
        "precisa_reposicao": precisa_reposicao(p, quantidade),
    }


def consultar_status_estoque(id_produto: int, db_path: str = DB_PATH) -> Dict[str, Any]:
    p = obter_produto(id_produto, db_path)
    quantidade = ProdutoRepo(db_path).quantidade_atual(id_produto)
    return _linha_status(p, quantidade)


def painel_estoque(db_path: str = DB_PATH) -> List[Dict[str, Any]]:
    """Situação do estoque de todos os produtos."""
    log_system_event("painel_estoque_start", {"db_path": db_path})
    try:
        repo = ProdutoRepo(db_path)
        quantidades = repo.quantidades()
        out = [_linha_status(p, quantidades.get(p.id)) for p in repo.get_all()]
    except Exception as e:
        log_transaction("painel_estoque", {"db_path": db_path}, error=str(e))
        raise
    log_transaction("painel_estoque", {"db_path": db_path}, result={"produtos": len(out)})
    return out
