"""FastAPI host for the interaction engine.

Routes:
- ``GET /health``: browser executable can be located (no launch)
- ``GET /info?url=``: launch, navigate once, report URL, status and title
- ``POST /run``: the full interaction pipeline

Run it with ``remoteclick serve`` or
``uvicorn --factory remoteclick.server.app:create_app``.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from remoteclick import __version__
from remoteclick.core.engine import InteractionEngine
from remoteclick.core.reporter import OutcomeReporter
from remoteclick.server.schemas import RunPayload
from remoteclick.utils.config import AppConfig, ConfigLoader
from remoteclick.utils.exceptions import FailureKind, ValidationFailure

logger = logging.getLogger(__name__)

RUN_STATUS: dict[FailureKind, int] = {
    FailureKind.VALIDATION: 400,
    FailureKind.FRAME_NOT_FOUND: 408,
    FailureKind.SELECTOR_TIMEOUT: 408,
    FailureKind.LAUNCH: 502,
    FailureKind.NAVIGATION: 502,
}


def status_for(kind: FailureKind | None) -> int:
    """HTTP status of a ``/run`` outcome with the given failure kind."""
    if kind is None:
        return 200
    return RUN_STATUS.get(kind, 500)


def create_app(
    config: AppConfig | None = None,
    engine: InteractionEngine | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        config: Configuration; loaded from the environment when omitted.
        engine: Engine to serve; built from ``config`` when omitted.

    Returns:
        The application.
    """
    if engine is None:
        engine = InteractionEngine(config or ConfigLoader.load())

    app = FastAPI(
        title="remoteclick", version=__version__, docs_url=None, redoc_url=None
    )

    @app.exception_handler(RequestValidationError)
    async def _invalid_body(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        # loc is ("body", <field>, ...) or just ("body",)
        invalid = sorted(
            {
                str(err["loc"][1]) if len(err["loc"]) > 1 else str(err["loc"][0])
                for err in exc.errors()
            }
        )
        failure = OutcomeReporter().failure(
            ValidationFailure("Invalid request body", invalid=invalid)
        )
        return JSONResponse(failure.to_dict(), status_code=400)

    @app.get("/health")
    async def health() -> JSONResponse:
        report = await engine.liveness()
        return JSONResponse(report.to_dict(), status_code=200 if report.ok else 503)

    @app.get("/info")
    async def info(url: str | None = None) -> JSONResponse:
        outcome = await engine.probe(url)
        if outcome.success:
            assert outcome.result is not None
            return JSONResponse({"ok": True, **outcome.result.to_dict()})
        assert outcome.failure is not None
        status = 400 if outcome.kind is FailureKind.VALIDATION else 500
        return JSONResponse(
            {"ok": False, **outcome.failure.to_dict()}, status_code=status
        )

    @app.post("/run")
    async def run_interaction(payload: RunPayload | None = None) -> JSONResponse:
        body = payload.to_mapping() if payload is not None else {}
        outcome = await engine.invoke(body)
        return JSONResponse(outcome.to_dict(), status_code=status_for(outcome.kind))

    return app


def run(config: AppConfig) -> None:
    """Serve the application with uvicorn until interrupted."""
    import uvicorn

    logger.info("Listening on %s:%d", config.host, config.port)
    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
    )
