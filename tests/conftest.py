"""
Shared fixtures: an in-memory product store that evaluates the same query
builder calls the real backends receive.
"""

import os

import pytest

# Never reach a real store from tests.
os.environ.setdefault("SUPABASE_URL", "")
os.environ.setdefault("MONGO_URI", "")

from catalogo import create_app  # noqa: E402
from catalogo.errors import StoreError  # noqa: E402
from catalogo.services.product_repository import ProductQuery, ProductRepository  # noqa: E402


class InMemoryQuery(ProductQuery):
    def __init__(self, store):
        self.store = store
        self.calls = []
        self._predicates = []
        self._order = None
        self._range = None

    def eq(self, column, value):
        self.calls.append(("eq", column, value))
        self._predicates.append(lambda row: row.get(column) == value)
        return self

    def ilike(self, column, term):
        self.calls.append(("ilike", column, term))
        needle = term.lower()
        self._predicates.append(lambda row: needle in str(row.get(column) or "").lower())
        return self

    def or_ilike(self, columns, term):
        self.calls.append(("or_ilike", tuple(columns), term))
        needle = term.lower()
        self._predicates.append(
            lambda row: any(needle in str(row.get(c) or "").lower() for c in columns)
        )
        return self

    def order(self, column, ascending=True):
        self.calls.append(("order", column, ascending))
        self._order = (column, ascending)
        return self

    def range(self, start, end):
        self.calls.append(("range", start, end))
        self._range = (start, end)
        return self

    def execute(self):
        self.store.queries.append(self)
        if self.store.fail_select:
            raise StoreError(self.store.fail_select)
        rows = [dict(r) for r in self.store.rows if all(p(r) for p in self._predicates)]
        if self._order:
            column, ascending = self._order
            rows.sort(key=lambda r: r.get(column) or "", reverse=not ascending)
        if self._range:
            start, end = self._range
            rows = rows[start:end + 1]
        return rows


class InMemoryRepository(ProductRepository):
    backend = "memory"

    def __init__(self, rows=None):
        self.rows = [dict(r) for r in rows or []]
        self.objects = {}
        self.queries = []
        self.uploads = []
        self.inserts = []
        self.removals = []
        self.fail_select = None
        self.fail_upload = None
        self.fail_insert = None
        self.fail_remove = None
        self._next_id = len(self.rows) + 1

    def products_query(self):
        return InMemoryQuery(self)

    def insert_product(self, record):
        self.inserts.append(dict(record))
        if self.fail_insert:
            raise StoreError(self.fail_insert)
        row = dict(record)
        row["id"] = self._next_id
        self._next_id += 1
        self.rows.append(row)

    def upload_image(self, key, data, content_type):
        self.uploads.append((key, data, content_type))
        if self.fail_upload:
            raise StoreError(self.fail_upload)
        self.objects[key] = (data, content_type)

    def get_public_url(self, key):
        return f"https://cdn.example.com/storage/v1/object/public/imagens-produtos/{key}"

    def remove_image(self, key):
        self.removals.append(key)
        if self.fail_remove:
            raise StoreError(self.fail_remove)
        self.objects.pop(key, None)


SAMPLE_ROWS = [
    {"id": 1, "nome": "Café Torrado", "categoria": "Bebidas Quentes", "descricao": "Café 500g",
     "preco": "19.90", "loja": "MercadoX", "imagem_url": "https://img/1.png", "link": "https://x/1"},
    {"id": 2, "nome": "Água Mineral", "categoria": "bebidas", "descricao": "Garrafa 1,5L",
     "preco": 3.5, "loja": "MercadoX Express", "imagem_url": "https://img/2.png", "link": "https://x/2"},
    {"id": 3, "nome": "Biscoito", "categoria": "Mercearia", "descricao": "Sabor chocolate",
     "preco": "4.20", "loja": "Loja Y", "imagem_url": "https://img/3.png", "link": "https://x/3"},
    {"id": 4, "nome": "Chocolate Quente", "categoria": "Bebidas Quentes", "descricao": "Pó solúvel",
     "preco": "12.00", "loja": "MercadoX", "imagem_url": "https://img/4.png", "link": "https://x/4"},
]


class CatalogTestConfig:
    TESTING = True
    API_PREFIX = "/api"
    IMAGES_FOLDER = "produtos"
    CORS_ALLOWED_ORIGINS = []
    STATIC_DIR = None
    LOG_LEVEL = "WARNING"


@pytest.fixture
def repository():
    return InMemoryRepository(SAMPLE_ROWS)


@pytest.fixture
def app(repository):
    return create_app(CatalogTestConfig, repository=repository)


@pytest.fixture
def client(app):
    return app.test_client()
