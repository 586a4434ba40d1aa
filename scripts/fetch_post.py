#!/usr/bin/env python3
"""
Fetch a Boosty post (and optionally its comments) and print the typed content.

Configuration (env, .env supported):
- BOOSTY_API_URL: API base URL (default https://api.boosty.to)
- BOOSTY_ACCESS_TOKEN: static bearer token
- BOOSTY_REFRESH_TOKEN + BOOSTY_DEVICE_ID: refresh flow (used when no access token)
- BOOSTY_HTTP_PROXY / BOOSTY_HTTPS_PROXY: optional proxies
- PROM_PORT: expose Prometheus metrics on this port while running (optional)

Usage:
  python scripts/fetch_post.py <blog> <post_id> [--comments N]
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

# Ensure repo root on sys.path when running as a script (so 'clients' package is importable)
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv
from prometheus_client import start_http_server

from clients.boosty import ApiClient, BoostyError, ClientOptions
from clients.boosty import media_content as mc


def format_item(item: mc.ContentItem, indent: str = "") -> str:
    if isinstance(item, mc.Text):
        return f"{indent}text[{item.modificator or '-'}]: {item.content}"
    if isinstance(item, mc.Image):
        return f"{indent}image {item.id}: {item.url}"
    if isinstance(item, mc.Video):
        return f"{indent}video: {item.url}"
    if isinstance(item, mc.OkVideo):
        return f"{indent}ok_video {item.vid} '{item.title}': {item.url}"
    if isinstance(item, mc.Audio):
        return f"{indent}audio '{item.title}' ({item.file_type or '?'}, {item.size} bytes): {item.url}"
    if isinstance(item, mc.Smile):
        return f"{indent}smile :{item.name}:"
    if isinstance(item, mc.Link):
        return f"{indent}link '{item.content}': {item.url}"
    if isinstance(item, mc.File):
        return f"{indent}file '{item.title}' ({item.size} bytes): {item.url}"
    if isinstance(item, mc.List):
        lines = [f"{indent}list[{item.style}]"]
        for n, group in enumerate(item.items, 1):
            lines.append(f"{indent}  {n}.")
            lines.extend(format_item(sub, indent + "    ") for sub in group)
        return "\n".join(lines)
    return f"{indent}unknown block ({item.block_type or 'untyped'})"


async def configure_credentials(client: ApiClient) -> str:
    access = os.environ.get("BOOSTY_ACCESS_TOKEN")
    refresh = os.environ.get("BOOSTY_REFRESH_TOKEN")
    device_id = os.environ.get("BOOSTY_DEVICE_ID")
    if access:
        await client.set_bearer_token(access)
        return "bearer"
    if refresh and device_id:
        await client.set_refresh_token_and_device_id(refresh, device_id)
        return "refresh"
    return "anonymous"


async def main() -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Print the content of a Boosty post")
    parser.add_argument("blog")
    parser.add_argument("post_id")
    parser.add_argument("--comments", type=int, default=0, help="also print up to N comments")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    prom_port = os.environ.get("PROM_PORT")
    if prom_port:
        try:
            start_http_server(int(prom_port))
            print(f"[fetch_post] Prometheus metrics on :{prom_port}")
        except (OSError, ValueError) as e:
            print(f"[fetch_post] WARN: failed to start Prometheus server: {e}")

    options = ClientOptions.from_env()
    async with ApiClient(options=options) as client:
        mode = await configure_credentials(client)
        print(f"[fetch_post] base={options.base_url} auth={mode}")

        try:
            post = await client.get_post(args.blog, args.post_id)
            print(f"[fetch_post] {post.safe_title()} (access={post.has_access})")
            for item in post.extract_content():
                print(format_item(item, "  "))

            if args.comments > 0:
                comments = await client.get_comments(args.blog, args.post_id, limit=args.comments)
                print(f"[fetch_post] comments: {len(comments.data)}")
                for comment in comments.data:
                    print(f"  #{comment.int_id} {comment.author.name}:")
                    for item in comment.extract_content():
                        print(format_item(item, "    "))
        except BoostyError as e:
            print(f"[fetch_post] ERROR: {e}")
            return 1

        creds = await client.credentials.snapshot()
        if mode == "refresh" and getattr(creds, "refresh_token", None) != os.environ.get("BOOSTY_REFRESH_TOKEN"):
            print("[fetch_post] NOTE: refresh token was rotated; update BOOSTY_REFRESH_TOKEN")
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)
