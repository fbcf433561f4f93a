import asyncio
import os

from sdk.pystore import StoreClient


async def create_many(client: StoreClient, count: int):
    responses = await asyncio.gather(*(
        client.create_product_async(f"Chew Toy #{i}", "4.99") for i in range(count)
    ))
    return [r.json() for r in responses if r.status_code == 201]


async def main():
    c = StoreClient(base_url=os.getenv("STORE_API_URL", "http://127.0.0.1:8085"))

    print("\n⚡ Creating 20 products concurrently...")
    created = await create_many(c, 20)
    ids = [p["id"] for p in created]

    print(f"✅ {len(created)} products created")
    if not ids:
        print("❌ no product was created, is the server running?")
        return
    if len(set(ids)) == len(ids):
        print(f"✅ all ids unique ({min(ids)}..{max(ids)})")
    else:
        print(f"❌ duplicate ids handed out: {sorted(ids)}")

    print("\n📦 Final product count:", len(c.list_products()))


if __name__ == "__main__":
    asyncio.run(main())
