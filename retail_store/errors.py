"""
errors.py
Errores de dominio de los stores. La capa HTTP los traduce a {"message": ...}.
"""


class StoreError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StoreError):
    """Falta un campo requerido o no hay stock suficiente."""

    status_code = 400


class NotFoundError(StoreError):
    """Id de usuario, producto, carrito o item de carrito inexistente."""

    status_code = 404
