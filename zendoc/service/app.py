"""FastAPI application entrypoint for zendoc service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError
from ..models import DocPlan
from ..orchestrator import GenerateOutcome, Orchestrator
from ..sidebar import SidebarBuilder


class PathRequest(BaseModel):
    path: str


class GenerateRequest(PathRequest):
    offline: bool = False


class TargetModel(BaseModel):
    relative_path: str
    category: str
    slug: str
    doc_path: str
    route: Optional[str] = None
    http_method: Optional[str] = None


class PlanResponse(BaseModel):
    root: str
    counts: Dict[str, int]
    targets: List[TargetModel]
    sidebar: List[Dict[str, Any]]


class GenerateResponse(BaseModel):
    status: str
    output_dir: str
    written: int
    fallbacks: List[str]
    failed: List[str]
    translated: bool


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def _plan_response(plan: DocPlan) -> PlanResponse:
    targets = [
        TargetModel(
            relative_path=target.record.relative_path,
            category=target.category.value,
            slug=target.slug,
            doc_path=target.doc_path,
            route=target.route.public_path if target.route else None,
            http_method=target.route.http_method if target.route else None,
        )
        for target in plan.targets
    ]
    return PlanResponse(
        root=plan.root,
        counts={str(category): count for category, count in plan.category_counts().items()},
        targets=targets,
        sidebar=SidebarBuilder.to_config(plan.sidebar),
    )


async def _in_executor(func: Callable[[], Any]) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func)


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing zendoc operations."""

    app = FastAPI(title="zendoc Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/plan", response_model=PlanResponse)
    async def plan_repo(
        payload: PathRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> PlanResponse:
        plan = await _in_executor(lambda: orchestrator.plan(payload.path))
        return _plan_response(plan)

    @app.post("/generate", response_model=GenerateResponse)
    async def generate_docs(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        outcome: GenerateOutcome = await _in_executor(
            lambda: orchestrator.run_generate(payload.path, offline=payload.offline)
        )
        return GenerateResponse(
            status="ok",
            output_dir=str(outcome.output_dir),
            written=len(outcome.written),
            fallbacks=outcome.fallbacks,
            failed=outcome.failed,
            translated=outcome.translated,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)
