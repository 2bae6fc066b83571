#!/usr/bin/env python
import os
import sys
import tempfile

from sdk.productclient import ProductClient


def _sample_files(workdir: str):
    # tiny placeholder media; pass real paths on the command line to upload actual files
    thumb = os.path.join(workdir, "img.png")
    clip = os.path.join(workdir, "clip.mp4")
    with open(thumb, "wb") as f:
        f.write(b"\x89PNG\r\n\x1a\n")
    with open(clip, "wb") as f:
        f.write(b"\x00\x00\x00\x18ftypmp42")
    return thumb, clip


def main():
    c = ProductClient(base_url=os.getenv("PRODUCT_API_URL", "http://127.0.0.1:5000"))

    with tempfile.TemporaryDirectory() as workdir:
        if len(sys.argv) == 3:
            thumb, clip = sys.argv[1], sys.argv[2]
        else:
            thumb, clip = _sample_files(workdir)

        # -----------------------------
        # Create a product with both media files
        # -----------------------------
        print("Creating product with thumbnail and video...")
        product = c.create_product("Demo", "A demo", thumb, clip)
        print(product)

    # -----------------------------
    # Create a text-only product
    # -----------------------------
    print("\nCreating product without media...")
    print(c.create_product("Text only", "No thumbnail, no video"))

    # -----------------------------
    # List products
    # -----------------------------
    print("\nListing products...")
    products = c.list_products()
    for p in products:
        print(p)
    print(f"\nDemo product listed: {any(p['id'] == product['id'] for p in products)}")


if __name__ == "__main__":
    main()
