"""
data.py
Usuarios y catálogo de productos en memoria.

IMPORTANTE: todo vive en memoria, se pierde al reiniciar el proceso.
"""

import threading
from typing import Dict, Iterable, List, Optional

from .errors import NotFoundError, ValidationError
from .models import Product, User


# Usuarios de demo
DEMO_USERS: List[Dict] = [
    {"id": 1, "name": "User 1", "email": "user1@example.com"},
    {"id": 2, "name": "User 2", "email": "user2@example.com"},
]


# Catálogo de demo
DEMO_PRODUCTS: List[Dict] = [
    {"id": 1, "name": "Product 1", "price": 29.99, "stock": 10},
    {"id": 2, "name": "Product 2", "price": 39.99, "stock": 5},
    {"id": 3, "name": "Product 3", "price": 49.99, "stock": 8},
]


class UserDirectory:
    """Lista ordenada de usuarios."""

    def __init__(self, users: Optional[Iterable[Dict]] = None):
        self._users: List[User] = [User(**u) for u in users or []]
        self._lock = threading.Lock()

    def list_users(self) -> List[User]:
        with self._lock:
            return [u.model_copy() for u in self._users]

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """
        Devuelve un usuario por id, o None si no existe.
        """
        for u in self._users:
            if u.id == user_id:
                return u
        return None

    def get_user(self, user_id: int) -> User:
        with self._lock:
            user = self.get_user_by_id(user_id)
            if not user:
                raise NotFoundError("User not found")
            return user.model_copy()

    def create_user(self, name: Optional[str], email: Optional[str]) -> User:
        """
        Crea un usuario nuevo.
        El id es len(usuarios) + 1: después de un borrado puede repetir un id existente.
        """
        if not name or not email:
            raise ValidationError("Name and email are required")

        with self._lock:
            user = User(id=len(self._users) + 1, name=name, email=email)
            self._users.append(user)
            return user.model_copy()

    def update_user(
        self,
        user_id: int,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> User:
        """
        Actualiza solo los campos que vienen con valor.
        """
        with self._lock:
            user = self.get_user_by_id(user_id)
            if not user:
                raise NotFoundError("User not found")
            if name:
                user.name = name
            if email:
                user.email = email
            return user.model_copy()

    def delete_user(self, user_id: int) -> None:
        with self._lock:
            user = self.get_user_by_id(user_id)
            if not user:
                raise NotFoundError("User not found")
            self._users.remove(user)


class ProductCatalog:
    """
    Lista ordenada de productos.

    `lock` es reentrante y lo comparte el CartStore: cualquier cambio de stock
    (desde el catálogo o desde un carrito) pasa por la misma sección crítica.
    """

    def __init__(self, products: Optional[Iterable[Dict]] = None):
        self._products: List[Product] = [Product(**p) for p in products or []]
        self.lock = threading.RLock()

    def find(self, product_id: int) -> Optional[Product]:
        """
        Devuelve el registro vivo del producto, o None si no existe.
        """
        for p in self._products:
            if p.id == product_id:
                return p
        return None

    def adjust_stock(self, product: Product, delta: int) -> None:
        product.stock += delta

    def list_products(self) -> List[Product]:
        with self.lock:
            return [p.model_copy() for p in self._products]

    def get_product(self, product_id: int) -> Product:
        with self.lock:
            product = self.find(product_id)
            if not product:
                raise NotFoundError("Product not found")
            return product.model_copy()

    def create_product(
        self,
        name: Optional[str],
        price: Optional[float],
        stock: Optional[int] = 0,
    ) -> Product:
        if not name or price is None:
            raise ValidationError("Name and price are required")
        stock = stock or 0
        _check_non_negative(price, stock)

        with self.lock:
            product = Product(
                id=len(self._products) + 1,
                name=name,
                price=price,
                stock=stock,
            )
            self._products.append(product)
            return product.model_copy()

    def update_product(
        self,
        product_id: int,
        name: Optional[str] = None,
        price: Optional[float] = None,
        stock: Optional[int] = None,
    ) -> Product:
        """
        Actualización parcial: solo se pisan los campos enviados.
        """
        with self.lock:
            product = self.find(product_id)
            if not product:
                raise NotFoundError("Product not found")
            _check_non_negative(price, stock)
            if name:
                product.name = name
            if price is not None:
                product.price = price
            if stock is not None:
                product.stock = stock
            return product.model_copy()

    def delete_product(self, product_id: int) -> None:
        with self.lock:
            product = self.find(product_id)
            if not product:
                raise NotFoundError("Product not found")
            self._products.remove(product)


def _check_non_negative(price: Optional[float], stock: Optional[int]) -> None:
    if price is not None and price < 0:
        raise ValidationError("Price cannot be negative")
    if stock is not None and stock < 0:
        raise ValidationError("Stock cannot be negative")
