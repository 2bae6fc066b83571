# sdk/productclient.py
import os
from contextlib import ExitStack
from typing import Any, Dict, List, Optional

import httpx
import requests


class ProductClient:
    def __init__(self, base_url: str = "http://localhost:5000", timeout: int = 60):
        self.base_url = base_url.rstrip("/")
        self.session = requests.Session()
        self.timeout = timeout

    @staticmethod
    def _form(title: Optional[str], description: Optional[str]) -> Dict[str, str]:
        data = {}
        if title is not None:
            data["title"] = title
        if description is not None:
            data["description"] = description
        return data

    # Create a product, uploading whichever media files are given
    def create_product(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_path: Optional[str] = None,
        video_path: Optional[str] = None,
    ) -> Dict[str, Any]:
        with ExitStack() as stack:
            files = {}
            if thumbnail_path:
                files["thumbnail"] = (os.path.basename(thumbnail_path), stack.enter_context(open(thumbnail_path, "rb")))
            if video_path:
                files["video"] = (os.path.basename(video_path), stack.enter_context(open(video_path, "rb")))
            r = self.session.post(
                f"{self.base_url}/products",
                data=self._form(title, description),
                files=files or None,
                timeout=self.timeout,
            )
        r.raise_for_status()
        return r.json()

    def list_products(self) -> List[Dict[str, Any]]:
        r = self.session.get(f"{self.base_url}/products", timeout=self.timeout)
        r.raise_for_status()
        return r.json()

    # Async create (used by the concurrent demo)
    async def create_product_async(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_path: Optional[str] = None,
        video_path: Optional[str] = None,
    ) -> httpx.Response:
        with ExitStack() as stack:
            files = {}
            if thumbnail_path:
                files["thumbnail"] = (os.path.basename(thumbnail_path), stack.enter_context(open(thumbnail_path, "rb")))
            if video_path:
                files["video"] = (os.path.basename(video_path), stack.enter_context(open(video_path, "rb")))
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                r = await client.post(
                    f"{self.base_url}/products",
                    data=self._form(title, description),
                    files=files or None,
                )
        # do not raise_for_status() here, callers inspect the 500 body
        return r


if __name__ == "__main__":
    import argparse
    import json

    parser = argparse.ArgumentParser(description="Product media API client")
    parser.add_argument("--base-url", default=os.getenv("PRODUCT_API_URL", "http://127.0.0.1:5000"))
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list-products", help="List all products")

    cp = subparsers.add_parser("create-product", help="Create a product")
    cp.add_argument("--title", help="Product title (max 50 characters)")
    cp.add_argument("--description", help="Product description (max 200 characters)")
    cp.add_argument("--thumbnail", help="Path to a thumbnail image")
    cp.add_argument("--video", help="Path to a video file")

    args = parser.parse_args()
    c = ProductClient(base_url=args.base_url)

    if args.command == "list-products":
        print(json.dumps(c.list_products(), indent=2))

    elif args.command == "create-product":
        print(json.dumps(c.create_product(args.title, args.description, args.thumbnail, args.video), indent=2))
