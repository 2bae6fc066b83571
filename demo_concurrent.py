import asyncio
import os
import tempfile

from sdk.productclient import ProductClient

# Two clients upload different bytes under the same filename at the same time.
# Each product must end up pointing at its own thumbnail.


async def simulate_create(client, title, thumbnail_path):
    r = await client.create_product_async(title, f"uploaded from {thumbnail_path}", thumbnail_path)
    if r.status_code == 201:
        body = r.json()
        print(f"✅ {title} created (ID: {body['id']}, thumbnail: {body['thumbnailUrl']})")
    else:
        print(f"❌ {title} failed with {r.status_code}: {r.text}")


async def main():
    c = ProductClient(base_url=os.getenv("PRODUCT_API_URL", "http://127.0.0.1:5000"))

    with tempfile.TemporaryDirectory() as a, tempfile.TemporaryDirectory() as b:
        paths = []
        for workdir, color in ((a, b"red"), (b, b"blue")):
            path = os.path.join(workdir, "thumb.png")
            with open(path, "wb") as f:
                f.write(b"\x89PNG\r\n\x1a\n" + color)
            paths.append(path)

        print("\n⚡ Creating two products concurrently with the same thumbnail filename...")
        await asyncio.gather(
            simulate_create(c, "Red", paths[0]),
            simulate_create(c, "Blue", paths[1]),
        )

    print("\n📦 Products:")
    for p in c.list_products():
        print(p)


if __name__ == "__main__":
    asyncio.run(main())
