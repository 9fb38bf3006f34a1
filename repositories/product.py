from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute
from models.product import Product, ProductDTO


class ProductRepository:

    @staticmethod
    async def search_by_name(term: str, limit: int, session: AsyncSession) -> list[ProductDTO]:
        stmt = (select(Product)
                .where(Product.name.ilike(f"%{term}%"))
                .order_by(Product.name)
                .limit(limit))
        products = await session_execute(stmt, session)
        return [ProductDTO.model_validate(product, from_attributes=True) for product in products.scalars().all()]

