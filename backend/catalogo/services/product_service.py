"""
Serviço de produtos - regras de negócio da listagem e do cadastro.

A listagem delega a montagem da consulta para ``product_filters``; o cadastro
faz upload da imagem, insere o registro e, se a inserção falhar, tenta apagar
a imagem enviada (compensação best-effort, sem retry).
"""

import time
from typing import Callable, Dict, List, Optional

from ..errors import InsertError, RetrievalError, StoreError, UploadError, ValidationError
from ..logging_utils import get_logger
from ..models.product import ImageUpload, Product, ProductSubmission
from . import product_filters as filters
from .product_repository import ProductRepository

LOG = get_logger(__name__)

MSG_NO_IMAGE = 'Nenhuma imagem foi enviada.'
MSG_UPLOAD_FAILED = 'Erro ao fazer upload da imagem.'
MSG_INSERT_FAILED = 'Erro ao cadastrar produto.'
MSG_RETRIEVAL_FAILED = 'Erro ao buscar produtos. Detalhes: {detail}'
MSG_CREATED = 'Produto cadastrado com sucesso!'


def _millis(clock: Callable[[], float]) -> int:
    return int(clock() * 1000)


class ProductService:
    """Listagem e cadastro de produtos sobre um ``ProductRepository``."""

    def __init__(self, repository: ProductRepository, images_folder: str = 'produtos',
                 clock: Callable[[], float] = time.time):
        self.repository = repository
        self.images_folder = images_folder.strip('/')
        self.clock = clock

    # ========== Listagem ==========

    def list_products(self, criteria: filters.FilterCriteria) -> List[Dict]:
        """Página de produtos que casam com ``criteria``, ordenada por nome."""
        LOG.debug("Filtros recebidos: %s", criteria.describe())

        query = filters.apply_filters(self.repository.products_query(), criteria)
        start, end = criteria.window
        LOG.debug("Paginação aplicada: offset=%d, limit=%d (linhas %d..%d)",
                  criteria.offset, criteria.page_size, start, end)

        try:
            rows = query.execute()
        except StoreError as e:
            LOG.error("Erro ao buscar produtos: %s", e)
            raise RetrievalError(MSG_RETRIEVAL_FAILED.format(detail=e), detail=str(e)) from e

        products = [Product.from_dict(row).to_dict() for row in rows or []]
        LOG.info("Listagem: %d produtos encontrados", len(products))
        return products

    # ========== Cadastro ==========

    def build_image_key(self, image: ImageUpload) -> str:
        """``<folder>/<epoch-millis>-<filename>``"""
        name = f"{_millis(self.clock)}-{image.basename}"
        if not self.images_folder:
            return name
        return f"{self.images_folder}/{name}"

    def create_product(self, submission: ProductSubmission, image: Optional[ImageUpload]) -> str:
        """Grava a imagem e o registro; devolve a mensagem de sucesso.

        Raises:
            ValidationError: nenhuma imagem enviada (nada é gravado)
            UploadError: falha no object storage (nada é inserido)
            InsertError: falha na inserção; a imagem enviada é removida (best-effort)
        """
        if image is None:
            raise ValidationError(MSG_NO_IMAGE)

        key = self.build_image_key(image)

        try:
            self.repository.upload_image(key, image.data, image.content_type)
        except StoreError as e:
            LOG.error("Erro no upload da imagem %s: %s", key, e)
            raise UploadError(MSG_UPLOAD_FAILED, detail=str(e)) from e
        LOG.info("Imagem enviada: %s %s", key, image.describe())

        image_url = self.repository.get_public_url(key)
        record = submission.to_product(image_url).to_dict()

        try:
            self.repository.insert_product(record)
        except StoreError as e:
            LOG.error("Erro ao cadastrar produto: %s", e)
            self._discard_image(key)
            raise InsertError(MSG_INSERT_FAILED, detail=str(e)) from e

        LOG.info("Produto cadastrado: %s", submission.name)
        return MSG_CREATED

    def _discard_image(self, key: str) -> None:
        """Compensação: apaga a imagem órfã uma única vez; falhas só vão para o log."""
        try:
            self.repository.remove_image(key)
        except Exception as e:
            LOG.warning("Não foi possível remover a imagem órfã %s: %s", key, e)
            return
        LOG.info("Imagem órfã removida: %s", key)
