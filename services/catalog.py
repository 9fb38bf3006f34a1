import logging
from contextlib import AbstractAsyncContextManager
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from db import get_catalog_session
from exceptions import QueryException
from models.customer import CustomerDTO
from models.product import ProductDTO
from repositories.customer import CustomerRepository
from repositories.product import ProductRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Read-only lookups against the hosted catalog.

    Both searches match the given fields case-insensitively with a substring
    pattern and return at most `limit` rows. Any database failure becomes
    QueryException.
    """

    def __init__(self, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]] = get_catalog_session):
        self.session_factory = session_factory

    async def search_products(self, term: str, limit: int | None = None) -> list[ProductDTO]:
        limit = limit or config.SEARCH_RESULT_LIMIT
        try:
            async with self.session_factory() as session:
                products = await ProductRepository.search_by_name(term, limit, session)
        except SQLAlchemyError as e:
            logger.error(f"Product search for '{term}' failed: {e}")
            raise QueryException("products", term, str(e))
        logger.debug(f"Product search '{term}' returned {len(products)} rows")
        return products

    async def search_customers(self, term: str, limit: int | None = None) -> list[CustomerDTO]:
        limit = limit or config.SEARCH_RESULT_LIMIT
        try:
            async with self.session_factory() as session:
                customers = await CustomerRepository.search(term, limit, session)
        except SQLAlchemyError as e:
            logger.error(f"Customer search for '{term}' failed: {e}")
            raise QueryException("customers", term, str(e))
        logger.debug(f"Customer search '{term}' returned {len(customers)} rows")
        return customers
