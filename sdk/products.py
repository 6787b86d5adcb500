# sdk/products.py
import os
from typing import Any, Dict, Optional

import httpx
import requests
from rich import print

DEFAULT_BASE_URL = os.environ.get("PRODUCT_API_URL", "http://127.0.0.1:3000")

FILTER_PARAMS = {
    "category": "category",
    "in_stock": "inStock",
    "min_price": "minPrice",
    "max_price": "maxPrice",
    "min_quantity": "minQuantity",
    "max_quantity": "maxQuantity",
    "name": "name",
    "description": "description",
    "sort_by": "sortBy",
    "sort_order": "sortOrder",
    "page": "page",
    "limit": "limit",
}


class ProductClientError(Exception):
    """Non-2xx response from the product API; ``body`` is the error envelope."""

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        message = body.get("message") if isinstance(body, dict) else body
        super().__init__(f"HTTP {status_code}: {message}")

    @property
    def errors(self):
        if isinstance(self.body, dict):
            return self.body.get("errors", [])
        return []


class ProductClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        # anything with requests' get/post/put/delete signature works (e.g. FastAPI's TestClient)
        self.session = session if session is not None else requests.Session()

    @property
    def products_url(self) -> str:
        return f"{self.base_url}/api/products"

    def _handle(self, r):
        if r.status_code == 204:
            return None
        try:
            body = r.json()
        except ValueError:
            body = r.text
        if r.status_code >= 400:
            raise ProductClientError(r.status_code, body)
        return body

    # Products
    def create_product(self, name: str, description: str, price: float, category: str,
                       in_stock: bool = True, quantity: int = 0) -> Dict[str, Any]:
        payload = {
            "name": name,
            "description": description,
            "price": price,
            "category": category,
            "inStock": in_stock,
            "quantity": quantity,
        }
        r = self.session.post(self.products_url, json=payload, timeout=self.timeout)
        return self._handle(r)["data"]

    def list_products(self, **filters) -> Dict[str, Any]:
        """
        Returns the whole listing envelope (data plus total/page/totalPages).
        Filters use snake_case names: list_products(category="Books", min_price=5).
        """
        params = {}
        for key, value in filters.items():
            if value is None:
                continue
            if key not in FILTER_PARAMS:
                raise TypeError(f"unknown filter: {key}")
            if isinstance(value, bool):
                value = "true" if value else "false"
            params[FILTER_PARAMS[key]] = value
        r = self.session.get(self.products_url, params=params, timeout=self.timeout)
        return self._handle(r)

    def search_products(self, name: str, **filters) -> Dict[str, Any]:
        return self.list_products(name=name, **filters)

    def get_product(self, product_id: str) -> Dict[str, Any]:
        r = self.session.get(f"{self.products_url}/{product_id}", timeout=self.timeout)
        return self._handle(r)["data"]

    def update_product(self, product_id: str, **fields) -> Dict[str, Any]:
        r = self.session.put(f"{self.products_url}/{product_id}", json=fields, timeout=self.timeout)
        return self._handle(r)["data"]

    def delete_product(self, product_id: str) -> None:
        r = self.session.delete(f"{self.products_url}/{product_id}", timeout=self.timeout)
        self._handle(r)

    def health(self) -> Dict[str, Any]:
        r = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
        return self._handle(r)

    # Async update (used by the concurrency demo)
    async def update_product_async(self, product_id: str, **fields) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            r = await client.put(f"{self.products_url}/{product_id}", json=fields)
            return self._handle(r)["data"]


if __name__ == "__main__":
    import argparse
    import json

    parser = argparse.ArgumentParser(description="Product API CLI")
    parser.add_argument("--url", default=DEFAULT_BASE_URL, help="Base URL of the product API")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---------------------------
    # Product commands
    # ---------------------------
    lp = subparsers.add_parser("list-products", help="List products")
    lp.add_argument("--category", help="Exact category")
    lp.add_argument("--in-stock", choices=["true", "false"], help="Stock status")
    lp.add_argument("--min-price", type=float)
    lp.add_argument("--max-price", type=float)
    lp.add_argument("--name", help="Substring of the product name")
    lp.add_argument("--sort-by", help="Field to sort by (default createdAt)")
    lp.add_argument("--sort-order", choices=["asc", "desc"])
    lp.add_argument("--page", type=int)
    lp.add_argument("--limit", type=int)

    gp = subparsers.add_parser("get-product", help="Get a product by its ID")
    gp.add_argument("--product-id", required=True)

    cp = subparsers.add_parser("create-product", help="Create a new product")
    cp.add_argument("--name", required=True)
    cp.add_argument("--description", required=True)
    cp.add_argument("--price", type=float, required=True)
    cp.add_argument("--category", required=True)
    cp.add_argument("--quantity", type=int, default=0)
    cp.add_argument("--out-of-stock", action="store_true")

    up = subparsers.add_parser("update-product", help="Update fields of a product")
    up.add_argument("--product-id", required=True)
    up.add_argument("--fields", required=True, help='JSON object, e.g. \'{"price": 12.5}\'')

    dp = subparsers.add_parser("delete-product", help="Delete a product")
    dp.add_argument("--product-id", required=True)

    subparsers.add_parser("health", help="Check the server")

    # ---------------------------
    # Parse and execute
    # ---------------------------
    args = parser.parse_args()
    c = ProductClient(base_url=args.url)

    try:
        if args.command == "list-products":
            in_stock = None if args.in_stock is None else args.in_stock == "true"
            print(c.list_products(
                category=args.category, in_stock=in_stock, min_price=args.min_price,
                max_price=args.max_price, name=args.name, sort_by=args.sort_by,
                sort_order=args.sort_order, page=args.page, limit=args.limit,
            ))
        elif args.command == "get-product":
            print(c.get_product(args.product_id))
        elif args.command == "create-product":
            print(c.create_product(args.name, args.description, args.price, args.category,
                                   in_stock=not args.out_of_stock, quantity=args.quantity))
        elif args.command == "update-product":
            print(c.update_product(args.product_id, **json.loads(args.fields)))
        elif args.command == "delete-product":
            c.delete_product(args.product_id)
            print(f"[green]Deleted {args.product_id}[/green]")
        elif args.command == "health":
            print(c.health())
    except ProductClientError as e:
        print(f"[red]{e}[/red]")
        for err in e.errors:
            print(f"  [yellow]{err['field']}[/yellow]: {err['message']}")
