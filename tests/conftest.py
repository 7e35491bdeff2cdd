"""
Fixtures compartidas: cada test arranca con una app y stores nuevos,
cargados con los datos de demo.
"""
import pytest
from fastapi.testclient import TestClient

from retail_store.cart_store import CartStore
from retail_store.data import DEMO_PRODUCTS, DEMO_USERS, ProductCatalog, UserDirectory
from shop_api import create_app


@pytest.fixture
def users() -> UserDirectory:
    return UserDirectory(DEMO_USERS)


@pytest.fixture
def catalog() -> ProductCatalog:
    return ProductCatalog(DEMO_PRODUCTS)


@pytest.fixture
def carts(catalog: ProductCatalog) -> CartStore:
    return CartStore(catalog)


@pytest.fixture
def app(users: UserDirectory, catalog: ProductCatalog):
    return create_app(users=users, catalog=catalog)


@pytest.fixture
def test_client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def stock_of(test_client: TestClient):
    """Lee el stock actual de un producto vía API."""

    def _stock_of(product_id: int) -> int:
        response = test_client.get(f"/api/products/{product_id}")
        assert response.status_code == 200
        return response.json()["stock"]

    return _stock_of
