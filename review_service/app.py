"""Review service: FastAPI application exposing the ``/reviews`` resource.

- ``GET /reviews`` — the accumulated reviews as a JSON array, in submission
  order.
- ``POST /reviews`` — append one ``{name, review}`` object; returns
  ``{"success": true}``.
- ``OPTIONS /reviews`` — pre-flight acknowledgement with an empty body.

Any other method on the path is answered with ``405``. Every response on the
path carries permissive CORS headers, including errors and pre-flights.

When a :class:`~review_service.database.PersistenceMirror` is wired in, the
store is seeded from it at startup and each accepted review is also written to
it. A failed write is reported to the client as ``500`` but the in-memory
append is kept, so the review stays visible until the process exits.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from review_service.config import Settings
from review_service.database import PersistenceError, PersistenceMirror
from review_service.schemas import HealthResponse, Review, SubmitResponse
from review_service.store import ReviewStore

logger = logging.getLogger(__name__)

REVIEWS_PATH = "/reviews"

CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class ErrorKind(str, enum.Enum):
    INVALID_PAYLOAD = "invalid_payload"
    PERSISTENCE = "persistence"


_ERROR_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.INVALID_PAYLOAD: 400,
    ErrorKind.PERSISTENCE: 500,
}


@dataclass(frozen=True)
class WriteOutcome:
    """Result of a review submission: success, or an error kind with a message."""

    error: Optional[ErrorKind] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls) -> "WriteOutcome":
        return cls()

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> "WriteOutcome":
        return cls(error=error, message=message)


def render_outcome(outcome: WriteOutcome) -> Response:
    """Serialize a :class:`WriteOutcome` into the HTTP response sent to the client."""
    if outcome.ok:
        return JSONResponse(SubmitResponse().model_dump())
    return PlainTextResponse(outcome.message, status_code=_ERROR_STATUS[outcome.error])


async def submit_review(
    body: bytes,
    store: ReviewStore,
    mirror: Optional[PersistenceMirror],
    write_lock: asyncio.Lock,
) -> WriteOutcome:
    """Decode ``body`` into a review, append it and mirror it when configured.

    With a mirror, the append and the insert run under ``write_lock`` so row
    ids follow the in-memory order. The append is not undone when the mirror
    write fails.
    """
    try:
        review = Review.model_validate_json(body)
    except ValidationError as exc:
        logger.debug("Rejected review payload: %s", exc)
        return WriteOutcome.failure(ErrorKind.INVALID_PAYLOAD, "Invalid request payload")

    if mirror is None:
        store.append(review)
        return WriteOutcome.success()

    async with write_lock:
        store.append(review)
        try:
            await mirror.save(review)
        except PersistenceError:
            return WriteOutcome.failure(
                ErrorKind.PERSISTENCE, "Failed to save review to the database"
            )

    return WriteOutcome.success()


def get_store(request: Request) -> ReviewStore:
    return request.app.state.store


def get_mirror(request: Request) -> Optional[PersistenceMirror]:
    return request.app.state.mirror


def get_write_lock(request: Request) -> asyncio.Lock:
    return request.app.state.write_lock


router = APIRouter()


@router.get(REVIEWS_PATH)
async def list_reviews(store: ReviewStore = Depends(get_store)) -> JSONResponse:
    """Return every review in submission order."""
    return JSONResponse([review.model_dump() for review in store.list()])


@router.post(REVIEWS_PATH)
async def post_review(
    request: Request,
    store: ReviewStore = Depends(get_store),
    mirror: Optional[PersistenceMirror] = Depends(get_mirror),
    write_lock: asyncio.Lock = Depends(get_write_lock),
) -> Response:
    """Append the review in the request body."""
    body = await request.body()
    outcome = await submit_review(body, store, mirror, write_lock)
    return render_outcome(outcome)


@router.options(REVIEWS_PATH)
async def preflight_reviews() -> Response:
    """Acknowledge a CORS pre-flight request."""
    return Response(status_code=200)


@router.get("/health", response_model=HealthResponse)
async def health(
    store: ReviewStore = Depends(get_store),
    mirror: Optional[PersistenceMirror] = Depends(get_mirror),
) -> HealthResponse:
    """Health check endpoint returning the service status."""
    return HealthResponse(
        status="ok",
        reviews=len(store),
        persistence="enabled" if mirror is not None else "disabled",
    )


def _is_reviews_path(request: Request) -> bool:
    path = request.url.path
    root_path = request.scope.get("root_path", "")
    if root_path and path.startswith(root_path):
        path = path[len(root_path):]
    return path == REVIEWS_PATH


async def _method_not_allowed_handler(
    request: Request, exc: StarletteHTTPException
) -> Response:
    if exc.status_code == 405:
        headers = exc.headers
        if _is_reviews_path(request):
            headers = {"Allow": CORS_HEADERS["Access-Control-Allow-Methods"]}
        return PlainTextResponse("Method not allowed", status_code=405, headers=headers)
    return await http_exception_handler(request, exc)


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[ReviewStore] = None,
    mirror: Optional[PersistenceMirror] = None,
) -> FastAPI:
    """Wire a store, an optional mirror and the HTTP routes into an application.

    Args:
        settings: Service settings; read from the environment when omitted.
        store: Store shared by all requests; a fresh empty one when omitted.
        mirror: Durable mirror. When omitted, one is built from
            ``settings.database_url`` if persistence is enabled.

    Returns:
        FastAPI: The configured application. Its lifespan initializes the
        mirror (fatal on failure) and seeds the store from it.
    """
    if settings is None:
        settings = Settings.from_env()
    if store is None:
        store = ReviewStore()
    if mirror is None and settings.persistence_enabled:
        mirror = PersistenceMirror(settings.database_url, echo=settings.db_echo)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Prepare the mirror and replay it into the store before serving."""
        try:
            if mirror is not None:
                await mirror.initialize()
                try:
                    store.extend(await mirror.load_all())
                except PersistenceError as exc:
                    logger.error(
                        "Failed to fetch reviews from the database: %s",
                        exc,
                        exc_info=True,
                    )
                logger.info("Loaded %d reviews from the database", len(store))

            yield
        finally:
            if mirror is not None:
                await mirror.close()

    app = FastAPI(
        root_path=settings.root_path,
        title="Review Service",
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.mirror = mirror
    app.state.write_lock = asyncio.Lock()

    @app.middleware("http")
    async def add_cors_headers(request: Request, call_next):
        response = await call_next(request)
        if _is_reviews_path(request):
            response.headers.update(CORS_HEADERS)
        return response

    app.add_exception_handler(StarletteHTTPException, _method_not_allowed_handler)
    app.include_router(router)
    return app
