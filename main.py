import importlib
import logging
import os
from pathlib import Path
from contextlib import asynccontextmanager
from typing import Dict, List
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from config.logging_config import configure_logging
from config.settings import settings
from models.index import init_db
from services.resource.errors import ApiError
from services.resource.responses import (
    code_for_status,
    error_envelope,
    error_response,
    json_response,
)

configure_logging()
logger = logging.getLogger(__name__)

API_DIR = Path(__file__).parent / "api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


app = FastAPI(title=settings.APP_NAME, debug=settings.DEBUG, lifespan=lifespan)
# CORS: use our parsed list
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["Authorization", "Content-Type"],
)


# ─── Error envelopes ──────────────────────────────────────────────────────────

@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return json_response(error_envelope(code_for_status(exc.status_code), message), exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details: Dict[str, List[str]] = {}
    for err in exc.errors():
        # drop the "body"/"query" prefix so keys are field names
        loc = [str(part) for part in err.get("loc", ())[1:]]
        details.setdefault(".".join(loc) or "__root__", []).append(err.get("msg", "Invalid value"))
    return json_response(error_envelope("VALIDATION_FAILED", "Validation failed", details), 422)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return json_response(error_envelope("INTERNAL_SERVER_ERROR", "An internal server error occurred"), 500)


# load all routes
def load_routes(directory: Path):
    routers = []
    for item in sorted(directory.rglob("*_routes.py")):
        relative = item.relative_to(directory.parent).with_suffix("")
        module = importlib.import_module(".".join(relative.parts))
        if hasattr(module, "router"):
            routers.append(module.router)
    return routers


for router in load_routes(API_DIR):
    app.include_router(router, prefix=f"/{settings.API_PREFIX}")


@app.get("/health")
def health_check():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=settings.DEBUG)
