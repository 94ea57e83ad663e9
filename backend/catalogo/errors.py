"""
Erros do catálogo.

Cada erro carrega a mensagem exibida ao cliente (``message``) e, opcionalmente,
o detalhe técnico vindo do store (``detail``). As rotas convertem qualquer
``CatalogError`` em ``{"error": message}`` com ``status_code``.
"""

from typing import Optional


class CatalogError(Exception):
    """Base de todos os erros de requisição do catálogo."""

    status_code = 500

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self):
        return {'error': self.message}


class ValidationError(CatalogError):
    """Requisição incompleta (ex.: nenhuma imagem enviada)."""

    status_code = 400


class UploadError(CatalogError):
    """Falha ao gravar o arquivo no object storage."""


class InsertError(CatalogError):
    """Falha ao inserir o registro do produto."""


class RetrievalError(CatalogError):
    """Falha na consulta de listagem."""


class StoreError(Exception):
    """Falha reportada pelo cliente do banco/storage.

    Os repositórios convertem as exceções específicas de cada cliente
    (PostgREST, Storage, PyMongo) nesta única classe.
    """


class ConfigurationError(Exception):
    """Nenhum backend de armazenamento configurado."""
