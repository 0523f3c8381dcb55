from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, FastAPI, File, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from gpt_site_gen.api.images import read_uploads
from gpt_site_gen.api.images import router as images_router
from gpt_site_gen.config import Settings, settings
from gpt_site_gen.delivery import archive_response
from gpt_site_gen.errors import InternalError, InvalidInput, SiteGenError
from gpt_site_gen.images import ImageProcessor, verify_image
from gpt_site_gen.pipeline import SiteGenerator
from gpt_site_gen.presets import preset_content
from gpt_site_gen.schemas import GenerateRequest, PageVariant, Style, Theme
from gpt_site_gen.storage import UploadStore

logger = logging.getLogger("gpt_site_gen")

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

GENERIC_DETAILS = "An unexpected error occurred"

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def index(request: Request):
    return templates.TemplateResponse(
        request=request,
        name="index.html",
        context={
            "themes": [t.value for t in Theme],
            "styles": [s.value for s in Style],
            "variants": [v.value for v in PageVariant],
            "website_types": ["business", "restaurant", "retail", "portfolio", "blog"],
        },
    )


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/generate")
async def generate(req: GenerateRequest, request: Request):
    archive = await request.app.state.generator.build(req)
    return archive_response(archive)


@router.post("/test-generate")
async def test_generate(req: GenerateRequest, request: Request):
    """Build a single-page site from canned content, without calling the generation API."""
    single = req.model_copy(update={"pages": PageVariant.SINGLE})
    content = preset_content(single.biz, single.niche, single.website_type)
    archive = await request.app.state.generator.build(single, content=content)
    return archive_response(archive)


@router.post("/upload")
async def upload_images(request: Request, images: list[UploadFile] | None = File(None)):
    cfg: Settings = request.app.state.settings
    uploads: UploadStore = request.app.state.uploads
    files = await read_uploads(images, cfg.max_upload_files, cfg.upload_max_bytes)
    urls: list[str] = []
    for name, content in files:
        verify_image(content, name)
        path = await run_in_threadpool(uploads.save, name, content)
        urls.append(uploads.public_url(path))
    return {"urls": urls}


def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


def _error_response(request: Request, err: SiteGenError, cause: BaseException | None = None) -> JSONResponse:
    cfg: Settings = request.app.state.settings
    if err.status_code >= 500:
        logger.error(
            "%s %s failed [%s]: %s (ip=%s)",
            request.method,
            request.url.path,
            err.code,
            err.message,
            _client_ip(request),
            exc_info=cause or err,
        )
        details = GENERIC_DETAILS if cfg.is_production else err.message
    else:
        logger.warning(
            "%s %s rejected [%s]: %s (ip=%s)",
            request.method,
            request.url.path,
            err.code,
            err.message,
            _client_ip(request),
        )
        details = err.message
    return JSONResponse(
        status_code=err.status_code,
        content={"error": err.title, "details": details, "code": err.code},
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(SiteGenError)
    async def _handle_site_error(request: Request, exc: SiteGenError):
        return _error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def _handle_request_validation(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        where = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        msg = first.get("msg", "invalid request")
        err = InvalidInput(f"{where}: {msg}" if where else msg)
        return _error_response(request, err)

    @app.exception_handler(StarletteHTTPException)
    async def _handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            logger.warning("Route not found: %s %s (ip=%s)", request.method, request.url.path, _client_ip(request))
            return JSONResponse(
                status_code=404,
                content={"error": "Not Found", "details": "The requested resource was not found"},
            )
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail, "details": exc.detail})

    @app.exception_handler(Exception)
    async def _handle_unexpected(request: Request, exc: Exception):
        return _error_response(request, _internal(exc), cause=exc)


def _internal(exc: Exception) -> InternalError:
    return InternalError(str(exc) or type(exc).__name__)


def _register_middleware(app: FastAPI, cfg: Settings) -> None:
    # Registered innermost first: each add wraps the ones before it.
    @app.middleware("http")
    async def _unexpected_errors(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return _error_response(request, _internal(exc), cause=exc)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.middleware("http")
    async def _security_headers(request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-XSS-Protection", "1; mode=block")
        return response


def create_app(app_settings: Settings | None = None) -> FastAPI:
    cfg = app_settings or settings
    app = FastAPI(title="GPT Site Generator")

    uploads = UploadStore(cfg)
    Path(cfg.generated_dir).mkdir(parents=True, exist_ok=True)

    app.state.settings = cfg
    app.state.uploads = uploads
    app.state.generator = SiteGenerator(cfg)
    app.state.images = ImageProcessor(cfg, uploads)

    _register_middleware(app, cfg)
    _register_error_handlers(app)
    app.include_router(router)
    app.include_router(images_router, prefix="/api/images")
    app.mount("/uploads", StaticFiles(directory=str(uploads.root_dir)), name="uploads")
    return app


app = create_app()
