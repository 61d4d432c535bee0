"""Application service: Sales reports for store owners (queries).

A sale is one order line of a store's product. Owners see the sales of
their own store; admins may look at any product.
"""

from __future__ import annotations

from shop.application.dto import SaleDTO
from shop.application.result import Failure, Result, Success
from shop.domain.repository.unit_of_work import UnitOfWork


class ListSalesHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def for_store(self, owner_id: str) -> Result[list[SaleDTO]]:
        with self._uow as uow:
            store = uow.stores.get_by_owner(owner_id)
            if store is None:
                return Failure.not_found("Store doesn't exist")
            product_ids = [p.id for p in uow.products.list_by_store(store.id)]
            sales = uow.orders.list_sales(product_ids) if product_ids else []
        return Success([SaleDTO.from_domain(sale) for sale in sales])

    def for_product(
        self, user_id: str, product_id: str, is_admin: bool = False
    ) -> Result[list[SaleDTO]]:
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                return Failure.not_found("Product doesn't exist")
            store = uow.stores.get_by_id(product.store_id) if product.store_id else None
            is_owner = store is not None and store.owner_id == user_id
            if not (is_owner or is_admin):
                return Failure.unauthorized("You aren't the store owner or an admin")
            sales = uow.orders.list_sales([product_id])
        return Success([SaleDTO.from_domain(sale) for sale in sales])
