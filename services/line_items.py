import logging
from typing import Iterator

from exceptions import OutOfStockException, InsufficientStockException, CartItemNotFoundException
from models.lineItem import LineItemDTO
from models.product import ProductDTO
from utils.identifiers import new_line_id

logger = logging.getLogger(__name__)


class LineItemStore:
    """
    Ordered collection of line items, unique by product id.

    Wraps the list owned by a cart or a draft and mutates it in place. Every
    change replaces the affected LineItemDTO with a freshly validated one, so a
    line either fully takes its new values or keeps its old ones.

    Stock rules:
    - a product with stock <= 0 cannot be added
    - incrementing an existing line past the product's stock is rejected and
      the line keeps its quantity
    - a new line asking for more than the stock is created at the stock
      ceiling and InsufficientStockException reports the clamp
    - set_quantity clamps to [1, known stock] and reports an overshoot
    """

    def __init__(self, items: list[LineItemDTO] | None = None):
        self._items = items if items is not None else []

    def __iter__(self) -> Iterator[LineItemDTO]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> list[LineItemDTO]:
        return list(self._items)

    def find(self, line_id: str) -> LineItemDTO | None:
        return next((item for item in self._items if item.line_id == line_id), None)

    def find_by_product(self, product_id: str) -> LineItemDTO | None:
        return next((item for item in self._items if item.product_id == product_id), None)

    def get(self, line_id: str) -> LineItemDTO:
        item = self.find(line_id)
        if item is None:
            raise CartItemNotFoundException(line_id)
        return item

    def add_or_increment(self, product: ProductDTO, requested_qty: int = 1) -> LineItemDTO:
        if requested_qty < 1:
            raise ValueError(f"requested quantity must be at least 1, got {requested_qty}")
        if product.stock <= 0:
            raise OutOfStockException(product.id, product.name)

        existing = self.find_by_product(product.id)
        if existing is not None:
            new_qty = existing.quantity + requested_qty
            if new_qty > product.stock:
                raise InsufficientStockException(product.id, product.name, new_qty, product.stock)
            # Re-adding refreshes the stock ceiling; the captured price stays
            return self._replace(existing, quantity=new_qty, known_stock=product.stock)

        quantity = min(requested_qty, product.stock)
        item = LineItemDTO(
            line_id=self._unique_line_id(),
            product_id=product.id,
            product_name=product.name,
            unit_price=product.price,
            quantity=quantity,
            known_stock=product.stock,
            image=product.image_ref,
            slug=product.slug,
        )
        self._items.append(item)
        if quantity < requested_qty:
            logger.info(f"New line for product {product.id} clamped from {requested_qty} to {quantity}")
            raise InsufficientStockException(product.id, product.name, requested_qty, product.stock,
                                             clamped_to=quantity)
        return item

    def set_quantity(self, line_id: str, new_qty: int, current_stock: int | None = None) -> LineItemDTO:
        """
        Set a line's quantity, clamped to [1, stock ceiling].

        current_stock, when given, is a fresher stock figure for the product
        (e.g. from a search the user just ran) and becomes the line's ceiling.
        The clamped value is stored before InsufficientStockException is raised.
        """
        item = self.get(line_id)
        ceiling = item.known_stock if current_stock is None else current_stock
        if ceiling < 1:
            raise OutOfStockException(item.product_id, item.product_name)

        if new_qty > ceiling:
            self._replace(item, quantity=ceiling, known_stock=ceiling)
            raise InsufficientStockException(item.product_id, item.product_name, new_qty, ceiling,
                                             clamped_to=ceiling)

        return self._replace(item, quantity=max(1, new_qty), known_stock=ceiling)

    def remove(self, line_id: str) -> LineItemDTO | None:
        item = self.find(line_id)
        if item is not None:
            self._items.remove(item)
        return item

    def clear(self) -> None:
        self._items.clear()

    def restore(self, items: list[LineItemDTO]) -> None:
        """Replace the contents, keeping the first line of any duplicated product."""
        seen = set()
        restored = []
        for item in items:
            if item.product_id not in seen:
                seen.add(item.product_id)
                restored.append(item)
        self._items[:] = restored

    def _replace(self, item: LineItemDTO, **changes) -> LineItemDTO:
        updated = LineItemDTO.model_validate({**item.model_dump(), **changes})
        self._items[self._items.index(item)] = updated
        return updated

    def _unique_line_id(self) -> str:
        taken = {item.line_id for item in self._items}
        line_id = new_line_id()
        while line_id in taken:
            line_id = new_line_id()
        return line_id
