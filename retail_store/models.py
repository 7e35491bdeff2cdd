"""
models.py
Registros que guardan los stores en memoria.
"""

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    id: int
    name: str
    email: str


class Product(BaseModel):
    id: int
    name: str
    price: float
    stock: int


class CartLineItem(BaseModel):
    # En JSON el id del producto viaja como "productId"
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(alias="productId")
    name: str
    price: float  # precio al momento de agregarlo al carrito
    quantity: int
