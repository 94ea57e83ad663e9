"""
Filtros de produtos - monta a consulta de listagem a partir dos parâmetros da URL.

Regras:
- categoria/loja: igualdade exata, ou substring sem diferenciar maiúsculas
  quando ``fuzzy=true`` (um único flag vale para as duas).
- termo: sempre substring sem diferenciar maiúsculas em nome OU descricao,
  independente do flag fuzzy.
- todos os filtros ativos são combinados com AND.
- ordenação sempre por nome ascendente; ``orderBy`` é aceito mas ignorado.
- paginação: page/limit com padrão 1/1000 e limit no máximo 1000.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..models.product import FIELD_CATEGORY, FIELD_DESCRIPTION, FIELD_NAME, FIELD_STORE

# Parâmetros de query aceitos por GET /api/produtos
PARAM_CATEGORY = 'categoria'
PARAM_STORE = 'loja'
PARAM_TERM = 'termo'
PARAM_FUZZY = 'fuzzy'
PARAM_PAGE = 'page'
PARAM_LIMIT = 'limit'
PARAM_ORDER_BY = 'orderBy'

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 1000
MAX_PAGE_SIZE = 1000
DEFAULT_ORDER_BY = 'nome_asc'

ORDER_COLUMN = FIELD_NAME
SEARCH_COLUMNS = (FIELD_NAME, FIELD_DESCRIPTION)

_LEADING_INT = re.compile(r'\s*([+-]?\d+)')


def _clean_text(value: Any) -> Optional[str]:
    """Trim a query value; empty or missing means "no filter"."""
    if value is None:
        return None
    cleaned = str(value).strip()
    return cleaned or None


def _parse_flag(value: Any) -> bool:
    if value is None:
        return False
    return str(value).lower() == 'true'


def _parse_positive_int(raw_value: Any, default: int, maximum: Optional[int] = None) -> int:
    """Parse the leading integer of a query param ("2.5" -> 2, "20px" -> 20).

    No leading digits, or a non-positive value, falls back to ``default``.
    """
    match = _LEADING_INT.match(str(raw_value)) if raw_value is not None else None
    if not match:
        return default
    parsed = int(match.group(1))
    if parsed < 1:
        return default
    if maximum is not None and parsed > maximum:
        return maximum
    return parsed


@dataclass
class FilterCriteria:
    """Critérios de uma requisição de listagem (reconstruídos a cada request)."""

    category: Optional[str] = None
    store: Optional[str] = None
    term: Optional[str] = None
    fuzzy: bool = False
    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    # Aceito pela API mas nunca aplicado: a ordenação é sempre por nome.
    order_by: str = DEFAULT_ORDER_BY

    @classmethod
    def from_args(cls, args) -> 'FilterCriteria':
        """Build criteria from a mapping of query parameters (e.g. ``request.args``)."""
        return cls(
            category=_clean_text(args.get(PARAM_CATEGORY)),
            store=_clean_text(args.get(PARAM_STORE)),
            term=_clean_text(args.get(PARAM_TERM)),
            fuzzy=_parse_flag(args.get(PARAM_FUZZY)),
            page=_parse_positive_int(args.get(PARAM_PAGE), DEFAULT_PAGE),
            page_size=_parse_positive_int(args.get(PARAM_LIMIT), DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE),
            order_by=_clean_text(args.get(PARAM_ORDER_BY)) or DEFAULT_ORDER_BY,
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def window(self) -> Tuple[int, int]:
        """Inclusive [start, end] row range of the requested page."""
        return self.offset, self.offset + self.page_size - 1

    def describe(self) -> Dict[str, Any]:
        return {
            'categoria': self.category,
            'loja': self.store,
            'termo': self.term,
            'fuzzy': self.fuzzy,
            'page': self.page,
            'limit': self.page_size,
            'orderBy': self.order_by,
        }


def _apply_text_filter(query, column: str, value: Optional[str], fuzzy: bool):
    if not value:
        return query
    if fuzzy:
        return query.ilike(column, value)
    return query.eq(column, value)


def apply_filters(query, criteria: FilterCriteria):
    """Compose the filters, ordering and page window onto a product query.

    ``query`` is any builder exposing ``eq``, ``ilike``, ``or_ilike``, ``order``
    and ``range`` (see ``ProductQuery``); each call returns the builder.
    """
    query = _apply_text_filter(query, FIELD_CATEGORY, criteria.category, criteria.fuzzy)
    query = _apply_text_filter(query, FIELD_STORE, criteria.store, criteria.fuzzy)

    if criteria.term:
        query = query.or_ilike(SEARCH_COLUMNS, criteria.term)

    query = query.order(ORDER_COLUMN, ascending=True)

    start, end = criteria.window
    return query.range(start, end)
