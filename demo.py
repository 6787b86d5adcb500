#!/usr/bin/env python
from sdk.products import DEFAULT_BASE_URL, ProductClient, ProductClientError


def main():
    c = ProductClient(base_url=DEFAULT_BASE_URL)

    print("Checking server...")
    print(c.health())

    # -----------------------------
    # Create products
    # -----------------------------
    print("\nCreating products...")
    phone = c.create_product("Demo iPhone", "Smartphone with OLED display", 999.99, "Smartphones", quantity=50)
    laptop = c.create_product("Demo MacBook", "High-end laptop with M1 chip", 1499.99, "Computers", quantity=30)
    earbuds = c.create_product("Demo AirPods", "Wireless earbuds", 199.99, "Electronics", in_stock=False)
    print(phone)
    print(laptop)
    print(earbuds)

    # -----------------------------
    # Validation failure
    # -----------------------------
    print("\nCreating an invalid product...")
    try:
        c.create_product("", "no name", -10, "Misc")
    except ProductClientError as e:
        print(e, e.errors)

    # -----------------------------
    # Filtering, sorting, paging
    # -----------------------------
    print("\nProducts between $1000 and $2000...")
    print(c.list_products(min_price=1000, max_price=2000, name="Demo"))

    print("\nIn-stock products, cheapest first...")
    listing = c.list_products(in_stock=True, sort_by="price", sort_order="asc", name="Demo")
    print([p["name"] for p in listing["data"]])

    print("\nSecond page, one per page...")
    print(c.list_products(name="demo", limit=1, page=2))

    # -----------------------------
    # Update
    # -----------------------------
    print("\nDropping the iPhone price...")
    print(c.update_product(phone["id"], price=899.99))

    # -----------------------------
    # Delete
    # -----------------------------
    print("\nCleaning up...")
    for product in (phone, laptop, earbuds):
        c.delete_product(product["id"])
    try:
        c.get_product(phone["id"])
    except ProductClientError as e:
        print(f"After delete: {e}")


if __name__ == "__main__":
    main()
