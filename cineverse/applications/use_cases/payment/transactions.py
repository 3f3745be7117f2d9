import math

from cineverse.applications.interfaces.dtos.filter_page import PageQuery
from cineverse.applications.interfaces.dtos.payment import TransactionPage
from cineverse.domain.ports.repositories.commerce_repository import TransactionRepository


class ListTransactionsUseCase:
    def __init__(self, transaction_repository: TransactionRepository):
        self.transaction_repository = transaction_repository

    async def execute(self, user_id: int, query: PageQuery) -> TransactionPage:
        transactions, total = await self.transaction_repository.get_page(user_id, query.offset, query.limit)
        return TransactionPage(
            transactions=transactions,
            total=total,
            page=query.page,
            pages=math.ceil(total / query.limit) if total else 0,
        )
