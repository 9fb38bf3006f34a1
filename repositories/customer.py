from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute
from models.customer import Customer, CustomerDTO


class CustomerRepository:

    @staticmethod
    async def search(term: str, limit: int, session: AsyncSession) -> list[CustomerDTO]:
        """Customers whose name, phone or email contains the term, case-insensitively."""
        pattern = f"%{term}%"
        stmt = (select(Customer)
                .where(or_(Customer.full_name.ilike(pattern),
                           Customer.phone.ilike(pattern),
                           Customer.email.ilike(pattern)))
                .order_by(Customer.full_name)
                .limit(limit))
        customers = await session_execute(stmt, session)
        return [CustomerDTO.model_validate(customer, from_attributes=True) for customer in customers.scalars().all()]
