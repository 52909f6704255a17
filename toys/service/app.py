"""FastAPI application serving the builder in a browser.

Build flags are passed as query parameters, as in
``http://localhost:8000/?compile&clean``:

- ``compile``  compile the project into the release tree.
- ``compress`` compile and compress the project.
- ``clean``    remove the compile cache and previous releases first.
- ``nocache``  compile without reading or updating the cache.
- ``make=ns``  scaffold a new module before building.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from ..builder import Builder, BuildResult
from ..config import COMPRESSED, UNCOMPRESSED, RunOptions
from ..errors import ToysError
from ..logging import get_logger
from ..rendering import render_error_page

SOURCES_MOUNT = "sources"
RELEASE_MOUNT = "release"

logger = get_logger("service")


class HealthResponse(BaseModel):
    status: str
    sources: str
    output: str


def _default_builder(options: RunOptions) -> Builder:
    return Builder(options)


def create_app(
    sources: Path,
    output: Path,
    *,
    cache_path: Path | None = None,
    builder_factory: Callable[[RunOptions], Builder] = _default_builder,
) -> FastAPI:
    """Create the application building ``sources`` into ``output`` on demand."""
    sources = Path(sources).expanduser().resolve()
    output = Path(output).expanduser().resolve()

    app = FastAPI(title="Toys Builder", version="1.0.0")
    app.mount(f"/{SOURCES_MOUNT}", StaticFiles(directory=str(sources), check_dir=False), name=SOURCES_MOUNT)
    app.mount(f"/{RELEASE_MOUNT}", StaticFiles(directory=str(output), check_dir=False), name=RELEASE_MOUNT)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", sources=str(sources), output=str(output))

    @app.get("/", response_class=HTMLResponse)
    async def build(request: Request) -> HTMLResponse:
        query = request.query_params

        def _run_build() -> BuildResult:
            compress = "compress" in query
            options = RunOptions.create(
                sources,
                output,
                compile="compile" in query,
                compress=compress,
                cache="nocache" not in query,
                clean="clean" in query,
                make=query.get("make") or None,
                cache_path=cache_path,
                sources_url=SOURCES_MOUNT,
                release_url=f"{RELEASE_MOUNT}/{COMPRESSED if compress else UNCOMPRESSED}",
            )
            return builder_factory(options).build(base_url=str(request.base_url))

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_build)
        return HTMLResponse(result.output)

    @app.exception_handler(ToysError)
    async def toys_error_handler(_: Any, exc: ToysError) -> HTMLResponse:
        logger.error("Build failed: %s", exc)
        return HTMLResponse(render_error_page(exc), status_code=500)

    return app


def run_service(
    sources: Path,
    output: Path,
    *,
    host: str = "127.0.0.1",
    port: int = 8000,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(sources, output), host=host, port=port)


__all__ = ["HealthResponse", "create_app", "run_service"]
