"""FastAPI application entrypoint for reusebom service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

try:  # pragma: no cover - optional dependency
    from fastapi import FastAPI
    from fastapi.responses import JSONResponse
    from pydantic import BaseModel

    _FASTAPI_AVAILABLE = True
except ModuleNotFoundError:  # pragma: no cover - service mode optional
    FastAPI = None  # type: ignore[assignment]
    JSONResponse = None  # type: ignore[assignment]
    BaseModel = object  # type: ignore[assignment]
    _FASTAPI_AVAILABLE = False

from ..config import DEFAULT_TOOL
from ..dep5 import DEFAULT_PACKAGE_CONFIG_PATH
from ..document import SoftwareBillOfMaterials
from ..resolver import SourceResolver

_MISSING_FASTAPI = (
    "FastAPI is required for service mode. Install it with `pip install reusebom[service]`."
)


class SbomRequest(BaseModel):
    name: str
    paths: List[str]
    tool: str = DEFAULT_TOOL
    package_config: Optional[str] = str(DEFAULT_PACKAGE_CONFIG_PATH)


class InspectRequest(BaseModel):
    path: str
    package_config: Optional[str] = str(DEFAULT_PACKAGE_CONFIG_PATH)


class HealthResponse(BaseModel):
    status: str


def _default_resolver(package_config: Optional[str]) -> SourceResolver:
    return SourceResolver(package_config)


async def _run(func: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:  # pragma: no cover - fallback path when not in async context
        return func()
    return await loop.run_in_executor(None, func)


def create_app(
    resolver_factory: Callable[[Optional[str]], SourceResolver] = _default_resolver,
) -> FastAPI:
    """Create the FastAPI application exposing document generation."""

    if not _FASTAPI_AVAILABLE:  # pragma: no cover - validated via unit tests
        raise RuntimeError(_MISSING_FASTAPI)

    app = FastAPI(title="reusebom Service", version="1.0.0")

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/sbom")
    async def generate(payload: SbomRequest) -> Dict[str, Any]:
        def _generate() -> Dict[str, Any]:
            document = SoftwareBillOfMaterials(
                payload.name,
                payload.tool,
                resolver=resolver_factory(payload.package_config),
            )
            document.add_files(payload.paths)
            return document.to_dict()

        return await _run(_generate)

    @app.post("/inspect")
    async def inspect(payload: InspectRequest) -> Dict[str, Any]:
        def _inspect() -> Dict[str, Any]:
            return resolver_factory(payload.package_config).resolve(payload.path).to_dict()

        return await _run(_inspect)

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    if not _FASTAPI_AVAILABLE:
        raise RuntimeError(_MISSING_FASTAPI)

    try:
        import uvicorn
    except ModuleNotFoundError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "uvicorn is required to run the service. Install it with `pip install uvicorn`."
        ) from exc

    uvicorn.run(create_app(), host=host, port=port)
