from time import perf_counter
from uuid import uuid4

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from structlog.contextvars import bind_contextvars, unbind_contextvars

from askwiki.config import settings
from askwiki.core.orchestrator import Orchestrator
from askwiki.logging_config import configure_logging
from askwiki.models import ErrorResponse, FetchResult, PipelineResponse, QueryRequest

configure_logging()
logger = structlog.get_logger("askwiki.api")

app = FastAPI(title="AskWiki Orchestrator Service")
orchestrator = Orchestrator()

INVALID_QUERY = "Invalid or missing query in request body."


@app.middleware("http")
async def request_context(request: Request, call_next):
    request_id = request.headers.get("x-request-id", str(uuid4()))
    bind_contextvars(request_id=request_id, path=request.url.path, method=request.method)
    started = perf_counter()

    try:
        response = await call_next(request)
        duration_ms = (perf_counter() - started) * 1000
        logger.info("request.completed", status_code=response.status_code, duration_ms=duration_ms)
        return response
    except Exception:
        duration_ms = (perf_counter() - started) * 1000
        logger.exception("request.failed", status_code=500, duration_ms=duration_ms)
        raise
    finally:
        unbind_contextvars("request_id", "path", "method")


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [{"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]} for error in exc.errors()]
    logger.warning("request.invalid", errors=len(details))
    query = exc.body.get("query") if isinstance(exc.body, dict) else None
    body = ErrorResponse(query=query if isinstance(query, str) else None, message=INVALID_QUERY, details=details)
    return JSONResponse(status_code=400, content=body.model_dump())


@app.get("/health")
async def health():
    return {"ok": True}


@app.post("/api/query", response_model=PipelineResponse, responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
async def post_query(body: QueryRequest):
    logger.info("query.received", query=body.query)
    try:
        result = await orchestrator.orchestrate(body.query)
    except Exception as exc:
        logger.exception("query.failed", query=body.query)
        error = ErrorResponse(
            query=body.query,
            message=str(exc) or "An unknown error occurred during orchestration.",
            details=getattr(exc, "details", None),
        )
        return JSONResponse(status_code=500, content=error.model_dump())

    logger.info("query.answered", query=body.query, mode=result.task.mode.value, error=result.error)
    return result


@app.get("/debug/research", response_model=FetchResult)
async def debug_research(query: str):
    """Show the lookup key derived from ``query`` and what the summary service returned for it."""
    result = await orchestrator.research(query)
    logger.info("debug.research", query=query, topic=result.topic, ok=result.ok)
    return result


def start():
    # Keep our structlog setup; prevent uvicorn from overriding logging configuration.
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    start()
