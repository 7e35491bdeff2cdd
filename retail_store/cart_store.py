"""
cart_store.py
Manejo de carritos en memoria por usuario, con reconciliación de stock.

Cada unidad en un carrito está descontada del stock del producto:
stock + suma de cantidades en todos los carritos == stock inicial.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

from .data import ProductCatalog
from .errors import NotFoundError, ValidationError
from .models import CartLineItem


class CartStore:
    """
    user_id -> lista de items.

    El user_id es el string que viene en la URL; no se valida contra el
    directorio de usuarios. Todas las operaciones corren bajo el lock del
    catálogo porque leen y escriben stock compartido.
    """

    def __init__(self, catalog: ProductCatalog):
        self.catalog = catalog
        self._carts: Dict[str, List[CartLineItem]] = {}

    # -------------------------
    # Acceso a carritos
    # -------------------------
    def has_cart(self, user_id: str) -> bool:
        return user_id in self._carts

    def get_or_create(self, user_id: str) -> List[CartLineItem]:
        """
        Devuelve el carrito del usuario, creándolo vacío si no existe.
        """
        with self.catalog.lock:
            return self._carts.setdefault(user_id, [])

    def _require_cart(self, user_id: str) -> List[CartLineItem]:
        cart = self._carts.get(user_id)
        if cart is None:
            raise NotFoundError("Cart not found")
        return cart

    @staticmethod
    def _find_item(cart: List[CartLineItem], product_id: int) -> Optional[CartLineItem]:
        for item in cart:
            if item.product_id == product_id:
                return item
        return None

    @staticmethod
    def _snapshot(cart: List[CartLineItem]) -> List[CartLineItem]:
        return [item.model_copy() for item in cart]

    # -------------------------
    # Operaciones
    # -------------------------
    def view_cart(self, user_id: str) -> Dict:
        """
        Devuelve {items, total}; el total se redondea a 2 decimales.
        """
        with self.catalog.lock:
            cart = self.get_or_create(user_id)
            total = sum(item.price * item.quantity for item in cart)
            return {"items": self._snapshot(cart), "total": _round_money(total)}

    def add_item(self, user_id: str, product_id: Optional[int], quantity: int = 1) -> List[CartLineItem]:
        """
        Agrega un producto al carrito y descuenta el stock.
        Si el producto ya está en el carrito, acumula la cantidad
        (el nombre y precio guardados no se refrescan).
        """
        if not product_id:
            raise ValidationError("ProductId is required")

        with self.catalog.lock:
            product = self.catalog.find(product_id)
            if not product:
                raise NotFoundError("Product not found")
            if quantity <= 0:
                raise ValidationError("Quantity must be greater than 0")
            if product.stock < quantity:
                raise ValidationError("Insufficient stock")

            cart = self.get_or_create(user_id)
            existing = self._find_item(cart, product_id)
            if existing:
                existing.quantity += quantity
            else:
                cart.append(
                    CartLineItem(
                        product_id=product_id,
                        name=product.name,
                        price=product.price,
                        quantity=quantity,
                    )
                )

            self.catalog.adjust_stock(product, -quantity)
            return self._snapshot(cart)

    def update_item(self, user_id: str, product_id: int, quantity: int) -> List[CartLineItem]:
        """
        Fija la cantidad de un item; la diferencia se toma o devuelve al stock.
        Cantidades 0 o negativas se aceptan tal cual.
        """
        with self.catalog.lock:
            cart = self._require_cart(user_id)
            item = self._find_item(cart, product_id)
            if not item:
                raise NotFoundError("Product not found in cart")

            diff = quantity - item.quantity
            product = self.catalog.find(product_id)
            if product:
                if diff > 0 and product.stock < diff:
                    raise ValidationError("Insufficient stock")
                self.catalog.adjust_stock(product, -diff)

            item.quantity = quantity
            return self._snapshot(cart)

    def remove_item(self, user_id: str, product_id: int) -> List[CartLineItem]:
        """
        Saca el item del carrito y devuelve toda su cantidad al stock.
        """
        with self.catalog.lock:
            cart = self._require_cart(user_id)
            item = self._find_item(cart, product_id)
            if not item:
                raise NotFoundError("Product not found in cart")

            product = self.catalog.find(product_id)
            if product:
                self.catalog.adjust_stock(product, item.quantity)

            cart.remove(item)
            return self._snapshot(cart)

    def clear_cart(self, user_id: str) -> List[CartLineItem]:
        """
        Limpia el carrito del usuario devolviendo cada cantidad al stock.
        """
        with self.catalog.lock:
            cart = self._require_cart(user_id)
            for item in cart:
                product = self.catalog.find(item.product_id)
                if product:
                    self.catalog.adjust_stock(product, item.quantity)

            self._carts[user_id] = []
            return []


def _round_money(value: float) -> float:
    # Redondeo a 2 decimales con empates hacia arriba sobre el valor binario exacto (0.125 -> 0.13)
    return float(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))
