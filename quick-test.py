# Tests rápidos contra un servidor corriendo
# Uso: python quick-test.py [local|<base_url>]

import sys
import requests

LOCAL_BASE_URL = "http://localhost:3000"

# Usuario de carrito propio para no pisar carritos de otros
SMOKE_USER = "smoke-test"
CART = f"/api/cart/{SMOKE_USER}"

# (descripción, método, path, body, status esperado)
# Cada paso depende del stock/carrito que deja el anterior.
STEPS = [
    ("health", "GET", "/healthz", None, 200),
    ("listar usuarios", "GET", "/api/users", None, 200),
    ("usuario sin email", "POST", "/api/users", {"name": "Smoke"}, 400),
    ("listar productos", "GET", "/api/products", None, 200),
    ("producto inexistente", "GET", "/api/products/999999", None, 404),
    ("ver carrito", "GET", CART, None, 200),
    ("agregar producto 1", "POST", f"{CART}/add", {"productId": 1, "quantity": 1}, 200),
    ("agregar sin stock", "POST", f"{CART}/add", {"productId": 1, "quantity": 999999}, 400),
    ("actualizar cantidad", "PUT", f"{CART}/update", {"productId": 1, "quantity": 2}, 200),
    ("quitar producto 1", "DELETE", f"{CART}/remove/1", None, 200),
    ("vaciar carrito", "DELETE", f"{CART}/clear", None, 200),
]


def check(session, base_url, step):
    """Devuelve None si el paso anduvo, o el motivo del fallo."""
    name, method, path, body, expected = step
    try:
        response = session.request(method, base_url + path, json=body, timeout=10)
    except requests.exceptions.RequestException as e:
        return f"{type(e).__name__} (¿servicio corriendo?)"
    if response.status_code != expected:
        return f"esperaba {expected}, vino {response.status_code}: {response.text[:200]}"
    return None


def main():
    if len(sys.argv) < 2:
        print("Uso: python quick-test.py [local|<base_url>]")
        sys.exit(1)

    target = sys.argv[1]
    base_url = LOCAL_BASE_URL if target.lower() == "local" else target.rstrip("/")
    print(f"Testing {base_url}")

    failures = []
    with requests.Session() as session:
        for step in STEPS:
            error = check(session, base_url, step)
            print(f"  {'FAIL' if error else 'ok  '} {step[1]} {step[2]} ({step[0]})")
            if error:
                print(f"       {error}")
                failures.append(step[0])

    print(f"{len(STEPS) - len(failures)}/{len(STEPS)} pasos OK")
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
