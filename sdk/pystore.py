# sdk/pystore.py
from decimal import Decimal
from typing import Any, Dict, List, Optional, Union

import httpx
import requests
from rich import print


def _price_json(price) -> Union[int, float]:
    # whole prices go out as ints so large values are not rounded
    d = Decimal(str(price))
    if d == d.to_integral_value():
        return int(d)
    return float(d)


class StoreClient:
    """Thin client for the products API.

    ``session`` may be any requests-like session; tests pass a Starlette
    ``TestClient`` to talk to an in-process app.
    """

    def __init__(self, base_url: str = "http://localhost:8085", timeout: int = 10,
                 session: Any = None, api_prefix: str = "/api"):
        self.base_url = base_url.rstrip("/")
        self.products_url = f"{self.base_url}{api_prefix}/products"
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def health(self) -> bool:
        r = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
        return r.status_code == 200

    def list_products(self) -> List[Dict[str, Any]]:
        r = self.session.get(self.products_url, timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    def get_product(self, product_id: int) -> Optional[Dict[str, Any]]:
        r = self.session.get(f"{self.products_url}/{product_id}", timeout=self.timeout)
        if r.status_code == 404:
            return None
        r.raise_for_status()
        return r.json()

    def create_product(self, name: str, price) -> Dict[str, Any]:
        r = self.session.post(self.products_url, json={"name": name, "price": _price_json(price)}, timeout=self.timeout)
        # 400 carries the per-field errors; hand them back instead of raising
        if r.status_code == 400:
            return r.json()
        r.raise_for_status()
        return r.json()

    def update_product(self, product_id: int, name: str, price) -> Optional[Dict[str, Any]]:
        """Replace a product. Returns None on success, or the error payload."""
        payload = {"id": product_id, "name": name, "price": _price_json(price)}
        r = self.session.put(f"{self.products_url}/{product_id}", json=payload, timeout=self.timeout)
        if r.status_code == 404:
            return {"error": f"product {product_id} not found"}
        if r.status_code == 400:
            return r.json()
        r.raise_for_status()
        return None

    def delete_product(self, product_id: int) -> bool:
        r = self.session.delete(f"{self.products_url}/{product_id}", timeout=self.timeout)
        if r.status_code == 404:
            return False
        r.raise_for_status()
        return True

    # Async create (used by the concurrency demo)
    async def create_product_async(self, name: str, price) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, headers=dict(self.session.headers)) as client:
            return await client.post(self.products_url, json={"name": name, "price": _price_json(price)})


if __name__ == "__main__":
    import argparse
    import os

    parser = argparse.ArgumentParser(description="Contoso Pets products CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-products", help="List all products")

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", type=int, required=True, help="ID of the product")

    cp = subparsers.add_parser("create-product", help="Create a new product")
    cp.add_argument("--name", required=True, help="Product name")
    cp.add_argument("--price", required=True, help="Price, e.g. 12.99")

    up = subparsers.add_parser("update-product", help="Replace an existing product")
    up.add_argument("--product-id", type=int, required=True, help="ID of the product")
    up.add_argument("--name", required=True, help="Product name")
    up.add_argument("--price", required=True, help="Price, e.g. 12.99")

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", type=int, required=True, help="ID of the product")

    args = parser.parse_args()
    c = StoreClient(base_url=os.getenv("STORE_API_URL", "http://127.0.0.1:8085"))

    if args.command == "list-products":
        print(c.list_products())
    elif args.command == "get-product":
        print(c.get_product(args.product_id) or f"[red]product {args.product_id} not found[/red]")
    elif args.command == "create-product":
        print(c.create_product(args.name, args.price))
    elif args.command == "update-product":
        print(c.update_product(args.product_id, args.name, args.price) or "[green]updated[/green]")
    elif args.command == "delete-product":
        print("[green]deleted[/green]" if c.delete_product(args.product_id) else f"[red]product {args.product_id} not found[/red]")
