"""
shop_api.py
API JSON de la tienda: usuarios, productos y carritos en memoria.

Correr con:
    uvicorn main:app --reload --port 3000
"""

import re
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from retail_store import settings
from retail_store.cart_store import CartStore
from retail_store.data import DEMO_PRODUCTS, DEMO_USERS, ProductCatalog, UserDirectory
from retail_store.errors import StoreError
from retail_store.log import logger, setup_logging
from retail_store.models import CartLineItem, Product, User


# -------------------------
# Pydantic models (API JSON)
# -------------------------
# Campos requeridos como Optional: la presencia la chequean los stores.
class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None


class ProductCreate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = 0


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = None


class CartAddItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: Optional[int] = Field(None, alias="productId")
    quantity: int = 1


class CartUpdateItemRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: int = Field(alias="productId")
    quantity: int


class MessageResponse(BaseModel):
    message: str


class CartView(BaseModel):
    items: List[CartLineItem]
    total: float


class CartResponse(BaseModel):
    message: str
    cart: List[CartLineItem]


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _path_id(raw: str) -> Optional[int]:
    """
    Id numérico de la URL, leyendo los dígitos iniciales ("12abc" -> 12).
    Sin dígitos devuelve None: ningún registro matchea y el store responde 404.
    """
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


# -------------------------
# Dependencias: stores de la app
# -------------------------
def get_users(request: Request) -> UserDirectory:
    return request.app.state.users


def get_catalog(request: Request) -> ProductCatalog:
    return request.app.state.catalog


def get_carts(request: Request) -> CartStore:
    return request.app.state.carts


# -------------------------
# Manejo de errores -> {"message": ...}
# -------------------------
async def store_error_handler(request: Request, exc: StoreError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"Invalid request: {field or 'body'} - {first.get('msg', 'invalid value')}"
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


def create_app(
    users: Optional[UserDirectory] = None,
    catalog: Optional[ProductCatalog] = None,
    seed: Optional[bool] = None,
) -> FastAPI:
    """
    Arma la app con sus propios stores.
    Sin stores explícitos se crean vacíos, o con los datos de demo si `seed`
    (por defecto SEED_DEMO_DATA) está activo.
    """
    setup_logging(settings.LOG_LEVEL)

    if seed is None:
        seed = settings.SEED_DEMO_DATA
    if users is None:
        users = UserDirectory(DEMO_USERS if seed else None)
    if catalog is None:
        catalog = ProductCatalog(DEMO_PRODUCTS if seed else None)

    app = FastAPI(
        title="Retail Store API",
        description="API JSON de usuarios, productos y carritos en memoria.",
        version="0.1.0",
    )
    app.state.users = users
    app.state.catalog = catalog
    app.state.carts = CartStore(catalog)

    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # -------------------------
    # Middlewares
    # -------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        target = request.url.path + (f"?{request.url.query}" if request.url.query else "")
        logger.info("%s %s", request.method, target)
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Unhandled error on %s %s", request.method, target)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"message": "Something went wrong!"},
            )

    # Registrado último => envuelve a log_requests, así también los 500 llevan CORS
    @app.middleware("http")
    async def cors_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = settings.CORS_ALLOW_ORIGIN
        response.headers["Access-Control-Allow-Headers"] = settings.CORS_ALLOW_HEADERS
        response.headers["Access-Control-Allow-Methods"] = settings.CORS_ALLOW_METHODS
        return response

    # -------------------------
    # API JSON: USERS
    # -------------------------
    @app.get("/api/users", response_model=List[User])
    def list_users(users: UserDirectory = Depends(get_users)):
        return users.list_users()

    @app.get("/api/users/{user_id}", response_model=User)
    def get_user(user_id: str, users: UserDirectory = Depends(get_users)):
        return users.get_user(_path_id(user_id))

    @app.post("/api/users", response_model=User, status_code=status.HTTP_201_CREATED)
    def create_user(payload: UserCreate, users: UserDirectory = Depends(get_users)):
        return users.create_user(payload.name, payload.email)

    @app.put("/api/users/{user_id}", response_model=User)
    def update_user(user_id: str, payload: UserUpdate, users: UserDirectory = Depends(get_users)):
        return users.update_user(_path_id(user_id), name=payload.name, email=payload.email)

    @app.delete("/api/users/{user_id}", response_model=MessageResponse)
    def delete_user(user_id: str, users: UserDirectory = Depends(get_users)):
        users.delete_user(_path_id(user_id))
        return {"message": "User deleted successfully"}

    # -------------------------
    # API JSON: PRODUCTS
    # -------------------------
    @app.get("/api/products", response_model=List[Product])
    def list_products(catalog: ProductCatalog = Depends(get_catalog)):
        return catalog.list_products()

    @app.get("/api/products/{product_id}", response_model=Product)
    def get_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
        return catalog.get_product(_path_id(product_id))

    @app.post("/api/products", response_model=Product, status_code=status.HTTP_201_CREATED)
    def create_product(payload: ProductCreate, catalog: ProductCatalog = Depends(get_catalog)):
        return catalog.create_product(payload.name, payload.price, payload.stock)

    @app.put("/api/products/{product_id}", response_model=Product)
    def update_product(
        product_id: str,
        payload: ProductUpdate,
        catalog: ProductCatalog = Depends(get_catalog),
    ):
        return catalog.update_product(
            _path_id(product_id),
            name=payload.name,
            price=payload.price,
            stock=payload.stock,
        )

    @app.delete("/api/products/{product_id}", response_model=MessageResponse)
    def delete_product(product_id: str, catalog: ProductCatalog = Depends(get_catalog)):
        catalog.delete_product(_path_id(product_id))
        return {"message": "Product deleted successfully"}

    # -------------------------
    # API JSON: CARTS
    # -------------------------
    @app.get("/api/cart/{user_id}", response_model=CartView)
    def view_cart(user_id: str, carts: CartStore = Depends(get_carts)) -> Dict[str, Any]:
        return carts.view_cart(user_id)

    @app.post("/api/cart/{user_id}/add", response_model=CartResponse)
    def add_to_cart(
        user_id: str,
        payload: CartAddItemRequest,
        carts: CartStore = Depends(get_carts),
    ) -> Dict[str, Any]:
        cart = carts.add_item(user_id, payload.product_id, payload.quantity)
        return {"message": "Product added to cart", "cart": cart}

    @app.put("/api/cart/{user_id}/update", response_model=CartResponse)
    def update_cart_item(
        user_id: str,
        payload: CartUpdateItemRequest,
        carts: CartStore = Depends(get_carts),
    ) -> Dict[str, Any]:
        cart = carts.update_item(user_id, payload.product_id, payload.quantity)
        return {"message": "Cart updated", "cart": cart}

    @app.delete("/api/cart/{user_id}/remove/{product_id}", response_model=CartResponse)
    def remove_from_cart(
        user_id: str,
        product_id: str,
        carts: CartStore = Depends(get_carts),
    ) -> Dict[str, Any]:
        cart = carts.remove_item(user_id, _path_id(product_id))
        return {"message": "Product removed from cart", "cart": cart}

    @app.delete("/api/cart/{user_id}/clear", response_model=CartResponse)
    def clear_cart(user_id: str, carts: CartStore = Depends(get_carts)) -> Dict[str, Any]:
        cart = carts.clear_cart(user_id)
        return {"message": "Cart cleared", "cart": cart}

    return app
