# Services package
#
# Module structure:
# - product_service.py: regras de negócio (listagem e cadastro)
# - product_filters.py: critérios de filtro e montagem da consulta
# - product_repository.py: interface do store + escolha do backend
# - supabase_repository.py / mongo_repository.py: backends concretos
# - env_utils.py: leitura de variáveis de ambiente

from .product_service import ProductService
from .product_repository import ProductRepository, ProductQuery, create_repository
from . import product_filters

__all__ = [
    'ProductService',
    'ProductRepository',
    'ProductQuery',
    'create_repository',
    'product_filters',
]
