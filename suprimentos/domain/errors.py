# suprimentos/domain/errors.py
"""
Exceções do domínio.

Todas são terminais: a camada de domínio e os casos de uso nunca
tentam novamente. Quem decide sobre retentativas é a camada de borda.
"""


class SuprimentosError(Exception):
    """Erro base do sistema de suprimentos."""


class NaoEncontradoError(SuprimentosError, LookupError):
    """Identificador informado sem registro correspondente."""


class ArgumentoInvalidoError(SuprimentosError, ValueError):
    """Entrada malformada ou fora do domínio (ex.: ID nulo, quantidade negativa)."""


class ConflitoError(SuprimentosError, RuntimeError):
    """Mutação viola uma regra de integridade (ex.: excluir ordem com lotes)."""
