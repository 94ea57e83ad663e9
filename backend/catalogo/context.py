from dataclasses import dataclass

from flask import current_app

from .services.product_repository import ProductRepository
from .services.product_service import ProductService

EXTENSION_KEY = 'catalogo'


@dataclass
class CatalogContext:
    """Store e serviços criados uma vez por aplicação."""

    repository: ProductRepository
    products: ProductService


def get_context() -> CatalogContext:
    return current_app.extensions[EXTENSION_KEY]
