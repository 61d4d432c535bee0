"""Domain service: Inventory Guard.

Checks a cart's line items against current stock. The caller is
responsible for locking the product rows first so that the stock read
here is the stock that checkout will decrement.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from shop.domain.model.cart import CartLineItem
from shop.domain.model.product import Product


class InventoryGuard:

    def check_availability(
        self,
        line_items: Iterable[CartLineItem],
        products: Mapping[str, Product],
    ) -> list[str]:
        """Return the titles of products that cannot cover their line.

        An empty list means every line is covered. Products that no longer
        exist are reported as short too.
        """
        short: list[str] = []
        for line in line_items:
            product = products.get(line.product_id)
            if product is None:
                title = line.product_title
            elif not product.has_stock_for(line.quantity):
                title = product.title
            else:
                continue
            if title not in short:
                short.append(title)
        return short
