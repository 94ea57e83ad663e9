"""
Backend Supabase: tabela via PostgREST e imagens no Supabase Storage.
"""

from typing import Any, Dict, List, Sequence

from supabase import Client, create_client

from ..errors import StoreError
from ..logging_utils import get_logger
from .product_repository import BACKEND_SUPABASE, ProductQuery, ProductRepository

LOG = get_logger(__name__)

# Caracteres reservados da sintaxe de filtros do PostgREST
_POSTGREST_RESERVED = set(',.:()"\\')


def _error_detail(exc: Exception) -> str:
    message = getattr(exc, 'message', None)
    return str(message or exc)


def _like_pattern(term: str) -> str:
    return f"%{term}%"


def _or_value(value: str) -> str:
    """Quote a value for an ``or=(...)`` filter when it holds reserved characters."""
    if not any(ch in _POSTGREST_RESERVED for ch in value):
        return value
    escaped = value.replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'


class SupabaseProductQuery(ProductQuery):
    """Wraps a postgrest-py select builder."""

    def __init__(self, builder):
        self._builder = builder

    def eq(self, column: str, value: Any) -> 'SupabaseProductQuery':
        self._builder = self._builder.eq(column, value)
        return self

    def ilike(self, column: str, term: str) -> 'SupabaseProductQuery':
        self._builder = self._builder.ilike(column, _like_pattern(term))
        return self

    def or_ilike(self, columns: Sequence[str], term: str) -> 'SupabaseProductQuery':
        pattern = _or_value(_like_pattern(term))
        condition = ','.join(f"{column}.ilike.{pattern}" for column in columns)
        self._builder = self._builder.or_(condition)
        return self

    def order(self, column: str, ascending: bool = True) -> 'SupabaseProductQuery':
        self._builder = self._builder.order(column, desc=not ascending)
        return self

    def range(self, start: int, end: int) -> 'SupabaseProductQuery':
        self._builder = self._builder.range(start, end)
        return self

    def execute(self) -> List[Dict[str, Any]]:
        try:
            response = self._builder.execute()
        except Exception as e:
            raise StoreError(_error_detail(e)) from e
        return list(response.data or [])


class SupabaseProductRepository(ProductRepository):
    """Produtos numa tabela do Supabase, imagens num bucket público."""

    backend = BACKEND_SUPABASE

    def __init__(self, client: Client, table: str = 'produtos', bucket: str = 'imagens-produtos'):
        self.client = client
        self.table = table
        self.bucket = bucket

    @classmethod
    def from_credentials(cls, url: str, key: str, **kwargs) -> 'SupabaseProductRepository':
        client = create_client(url, key)
        LOG.info("✓ Supabase client ready (%s)", url)
        return cls(client, **kwargs)

    def _storage(self):
        return self.client.storage.from_(self.bucket)

    def products_query(self) -> SupabaseProductQuery:
        return SupabaseProductQuery(self.client.table(self.table).select('*'))

    def insert_product(self, record: Dict[str, Any]) -> None:
        try:
            self.client.table(self.table).insert([record]).execute()
        except Exception as e:
            raise StoreError(_error_detail(e)) from e

    def upload_image(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self._storage().upload(key, data, file_options={'content-type': content_type})
        except Exception as e:
            raise StoreError(_error_detail(e)) from e

    def get_public_url(self, key: str) -> str:
        return self._storage().get_public_url(key)

    def remove_image(self, key: str) -> None:
        try:
            self._storage().remove([key])
        except Exception as e:
            raise StoreError(_error_detail(e)) from e
