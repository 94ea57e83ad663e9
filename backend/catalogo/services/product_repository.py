"""
Repositório de produtos - fronteira com o banco hospedado e o object storage.

Dois backends implementam a mesma interface:
- SupabaseProductRepository: tabela PostgREST + bucket do Supabase Storage
- MongoProductRepository: coleção MongoDB + GridFS (via Flask-PyMongo)

As consultas seguem o estilo query builder: cada filtro devolve o próprio
builder e ``execute()`` dispara a leitura.
"""

from typing import Any, Dict, List, Sequence

from ..errors import ConfigurationError
from ..logging_utils import get_logger

LOG = get_logger(__name__)

BACKEND_SUPABASE = 'supabase'
BACKEND_MONGO = 'mongo'


class ProductQuery:
    """Query builder sobre a coleção de produtos."""

    def eq(self, column: str, value: Any) -> 'ProductQuery':
        raise NotImplementedError

    def ilike(self, column: str, term: str) -> 'ProductQuery':
        """Case-insensitive substring match of ``term`` against ``column``."""
        raise NotImplementedError

    def or_ilike(self, columns: Sequence[str], term: str) -> 'ProductQuery':
        """Case-insensitive substring match of ``term`` against any of ``columns``."""
        raise NotImplementedError

    def order(self, column: str, ascending: bool = True) -> 'ProductQuery':
        raise NotImplementedError

    def range(self, start: int, end: int) -> 'ProductQuery':
        """Restrict to rows ``start``..``end`` (inclusive, zero based)."""
        raise NotImplementedError

    def execute(self) -> List[Dict[str, Any]]:
        """Run the read; raises ``StoreError`` on failure."""
        raise NotImplementedError


class ProductRepository:
    """Operações de leitura/escrita exigidas pelo catálogo.

    Toda falha do cliente subjacente sai como ``StoreError``.
    """

    backend = ''
    # True quando a própria aplicação precisa servir as imagens (GridFS)
    serves_images = False

    def products_query(self) -> ProductQuery:
        raise NotImplementedError

    def insert_product(self, record: Dict[str, Any]) -> None:
        raise NotImplementedError

    def upload_image(self, key: str, data: bytes, content_type: str) -> None:
        raise NotImplementedError

    def get_public_url(self, key: str) -> str:
        raise NotImplementedError

    def remove_image(self, key: str) -> None:
        raise NotImplementedError


def resolve_backend(config) -> str:
    """Pick the store backend from config: explicit STORE_BACKEND, else Supabase, else MongoDB."""
    explicit = (config.get('STORE_BACKEND') or '').strip().lower()
    if explicit:
        if explicit not in (BACKEND_SUPABASE, BACKEND_MONGO):
            raise ConfigurationError(f"STORE_BACKEND inválido: {explicit!r}")
        return explicit
    if config.get('SUPABASE_URL'):
        return BACKEND_SUPABASE
    if config.get('MONGO_URI'):
        return BACKEND_MONGO
    raise ConfigurationError(
        'Nenhum backend configurado: defina SUPABASE_URL/SUPABASE_ANON_KEY ou MONGO_URI.'
    )


def create_repository(app) -> ProductRepository:
    """Build the repository for ``app`` once, at startup."""
    backend = resolve_backend(app.config)

    if backend == BACKEND_SUPABASE:
        from .supabase_repository import SupabaseProductRepository

        url = app.config.get('SUPABASE_URL')
        key = app.config.get('SUPABASE_ANON_KEY')
        if not url or not key:
            raise ConfigurationError('SUPABASE_URL e SUPABASE_ANON_KEY são obrigatórios.')
        repository = SupabaseProductRepository.from_credentials(
            url,
            key,
            table=app.config.get('PRODUCTS_TABLE', 'produtos'),
            bucket=app.config.get('IMAGES_BUCKET', 'imagens-produtos'),
        )
    else:
        from .mongo_repository import MongoProductRepository

        if not app.config.get('MONGO_URI'):
            raise ConfigurationError('MONGO_URI é obrigatório para o backend mongo.')
        repository = MongoProductRepository.from_app(
            app,
            collection=app.config.get('PRODUCTS_TABLE', 'produtos'),
            bucket=app.config.get('IMAGES_BUCKET', 'imagens-produtos'),
        )

    LOG.info("Store backend: %s", backend)
    return repository
