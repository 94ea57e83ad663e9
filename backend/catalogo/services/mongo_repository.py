"""
Backend MongoDB: coleção de produtos + imagens no GridFS.

As URLs públicas das imagens apontam para ``/api/imagens/<key>``, servidas
pela própria aplicação via ``PyMongo.send_file``.
"""

import re
from typing import Any, Dict, List, Optional, Sequence

import gridfs
from flask import url_for
from flask_pymongo import PyMongo
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError

from ..errors import ConfigurationError, StoreError
from ..logging_utils import get_logger
from .product_repository import BACKEND_MONGO, ProductQuery, ProductRepository

LOG = get_logger(__name__)

IMAGE_ENDPOINT = 'images.get_image'


def _substring_regex(term: str) -> Dict[str, str]:
    return {'$regex': re.escape(term), '$options': 'i'}


def _serialize(document: Dict[str, Any]) -> Dict[str, Any]:
    """Expose the ObjectId as a string ``id`` like the hosted store does."""
    doc = dict(document)
    object_id = doc.pop('_id', None)
    if object_id is not None and 'id' not in doc:
        doc['id'] = str(object_id)
    return doc


class MongoProductQuery(ProductQuery):
    """Accumulates clauses and runs a single ``find`` on ``execute``."""

    def __init__(self, collection):
        self._collection = collection
        self._clauses: List[Dict[str, Any]] = []
        self._sort: List[tuple] = []
        self._skip = 0
        self._limit = 0

    def eq(self, column: str, value: Any) -> 'MongoProductQuery':
        self._clauses.append({column: value})
        return self

    def ilike(self, column: str, term: str) -> 'MongoProductQuery':
        self._clauses.append({column: _substring_regex(term)})
        return self

    def or_ilike(self, columns: Sequence[str], term: str) -> 'MongoProductQuery':
        self._clauses.append({'$or': [{column: _substring_regex(term)} for column in columns]})
        return self

    def order(self, column: str, ascending: bool = True) -> 'MongoProductQuery':
        self._sort.append((column, ASCENDING if ascending else DESCENDING))
        return self

    def range(self, start: int, end: int) -> 'MongoProductQuery':
        self._skip = start
        self._limit = end - start + 1
        return self

    @property
    def filter(self) -> Dict[str, Any]:
        if not self._clauses:
            return {}
        if len(self._clauses) == 1:
            return dict(self._clauses[0])
        return {'$and': list(self._clauses)}

    def execute(self) -> List[Dict[str, Any]]:
        try:
            cursor = self._collection.find(self.filter)
            if self._sort:
                cursor = cursor.sort(self._sort)
            if self._skip:
                cursor = cursor.skip(self._skip)
            if self._limit:
                cursor = cursor.limit(self._limit)
            return [_serialize(doc) for doc in cursor]
        except PyMongoError as e:
            raise StoreError(str(e)) from e


class MongoProductRepository(ProductRepository):
    """Produtos numa coleção MongoDB, imagens num bucket GridFS."""

    backend = BACKEND_MONGO
    serves_images = True

    def __init__(self, db, collection: str = 'produtos', bucket: str = 'imagens-produtos',
                 mongo: Optional[PyMongo] = None):
        self.db = db
        self.collection = db[collection]
        self.bucket = bucket
        self.mongo = mongo
        self.fs = gridfs.GridFS(db, collection=bucket)

    @classmethod
    def from_app(cls, app, **kwargs) -> 'MongoProductRepository':
        mongo = PyMongo(app, uri=app.config['MONGO_URI'])
        if mongo.db is None:
            raise ConfigurationError('MONGO_URI precisa incluir o nome do banco (ex.: mongodb://host/catalogo).')
        LOG.info("✓ MongoDB ready (database %s)", mongo.db.name)
        return cls(mongo.db, mongo=mongo, **kwargs)

    def products_query(self) -> MongoProductQuery:
        return MongoProductQuery(self.collection)

    def insert_product(self, record: Dict[str, Any]) -> None:
        try:
            # insert_one adiciona _id ao dict recebido
            self.collection.insert_one(dict(record))
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    def upload_image(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self.fs.put(data, filename=key, content_type=content_type)
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    def get_public_url(self, key: str) -> str:
        return url_for(IMAGE_ENDPOINT, key=key, _external=True)

    def remove_image(self, key: str) -> None:
        try:
            for grid_out in self.fs.find({'filename': key}):
                self.fs.delete(grid_out._id)
        except PyMongoError as e:
            raise StoreError(str(e)) from e

    def send_image(self, key: str):
        """Flask response streaming the stored image (404 when missing)."""
        return self.mongo.send_file(key, base=self.bucket)
