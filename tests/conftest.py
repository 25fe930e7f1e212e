# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path
from typing import Dict, List, Tuple

import pytest
import pytest_asyncio
from aiohttp import web

from registry_scout.config import CrawlerConfig

#: package name -> list of (file name, size in bytes)
RegistryLayout = Dict[str, List[Tuple[str, int]]]

TWO_PACKAGES: RegistryLayout = {
    "pkgA": [("pkga-1.0.tar.gz", 1024)],
    "pkgB": [("pkgb-1.0.tar.gz", 2048)],
}


async def serve_app(app: web.Application, port: int) -> AsyncIterator[str]:
    """Start *app* on *port*, yield base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "localhost", port)
    await site.start()
    try:
        yield f"http://localhost:{port}"
    finally:
        await runner.cleanup()


def registry_app(base: str, layout: RegistryLayout) -> web.Application:
    """
    Build a flat registry: ``/simple/`` lists every package with a
    site-relative href, each package page lists absolute file URLs and
    ``/files/<name>`` serves a body of the declared size (GET and HEAD).
    """
    app = web.Application()
    index = "\n".join(
        f'<a href="/simple/{name.lower()}/">{name}</a><br/>' for name in layout
    )

    async def handle_index(_):
        return web.Response(text=f"<html><body>\n{index}\n</body></html>", content_type="text/html")

    app.router.add_get("/simple/", handle_index)

    for name, files in layout.items():
        page = "\n".join(
            f'<a href="{base}/files/{fname}#sha256=00ff" data-requires-python="&gt;=3.8">{fname}</a><br/>'
            for fname, _ in files
        )

        async def handle_page(_, page=page):
            return web.Response(text=f"<html><body>\n{page}\n</body></html>", content_type="text/html")

        app.router.add_get(f"/simple/{name.lower()}/", handle_page)

        for fname, size in files:

            async def handle_file(_, size=size):
                return web.Response(body=b"x" * size, content_type="application/octet-stream")

            app.router.add_get(f"/files/{fname}", handle_file)

    return app


def make_config(base: str, tmp_path: Path, **overrides) -> CrawlerConfig:
    """Config pointing at a local registry, without the status line."""
    values = dict(
        registry_url=f"{base}/simple/",
        output_path=tmp_path / "output.csv",
        max_concurrent_requests=10,
        launch_delay=0,
        timeout=5.0,
        user_agent="TestAgent/1.0",
        show_progress=False,
    )
    values.update(overrides)
    return CrawlerConfig(**values)


@pytest.fixture()
def base_url(unused_tcp_port: int) -> str:
    return f"http://localhost:{unused_tcp_port}"


@pytest_asyncio.fixture
async def registry_server(unused_tcp_port: int, base_url: str) -> AsyncIterator[str]:
    """Registry with two packages, one 1024-byte and one 2048-byte file."""
    async for url in serve_app(registry_app(base_url, TWO_PACKAGES), unused_tcp_port):
        yield url
