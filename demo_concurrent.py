import asyncio

from sdk.products import DEFAULT_BASE_URL, ProductClient, ProductClientError

# Updates to one product are not serialised: whichever write lands last wins.


async def reprice(client, product_id, price):
    try:
        product = await client.update_product_async(product_id, price=price)
        print(f"✅ set price {price:.2f} -> stored {product['price']:.2f}")
    except ProductClientError as e:
        print(f"❌ update to {price:.2f} failed: {e}")


async def main():
    c = ProductClient(base_url=DEFAULT_BASE_URL)

    product = c.create_product("Gaming Laptop", "RTX laptop", 1500.0, "Computers", quantity=2)
    product_id = product["id"]
    print(f"\n🖥️  Created product: {product}")

    print("\n⚡ Sending concurrent price updates...")
    await asyncio.gather(*(reprice(c, product_id, price) for price in (1400.0, 1450.0, 1300.0, 1550.0)))

    print("\n📦 Final product state:", c.get_product(product_id))
    c.delete_product(product_id)


if __name__ == "__main__":
    asyncio.run(main())
