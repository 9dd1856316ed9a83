import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile as StarletteUploadFile

from branding.config import Settings, get_settings
from branding.errors import BrandingError
from branding.models import BrandedImageResponse, ErrorResponse, HealthResponse
from branding.processor import UploadedImage, authenticate, process_image

logger = logging.getLogger("branding")

STORAGE_ROUTE = "/storage"

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    415: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


async def _read_upload(field) -> Optional[UploadedImage]:
    # Browsers send an empty part with no filename when no file was picked.
    if not isinstance(field, StarletteUploadFile) or not field.filename:
        return None
    try:
        data = await field.read()
    finally:
        await field.close()
    return UploadedImage(filename=field.filename, data=data)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if not settings.api_token:
        logger.warning("BRANDING_API_TOKEN is not set; every request will be rejected")

    app = FastAPI(title="Image branding")
    app.state.settings = settings
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Branded images are served from here; the URLs returned by the API
    # point into this mount unless BRANDING_PUBLIC_URL says otherwise.
    app.mount(
        STORAGE_ROUTE,
        StaticFiles(directory=str(settings.public_dir), check_dir=False),
        name="storage",
    )

    @app.exception_handler(BrandingError)
    async def branding_error_handler(request: Request, exc: BrandingError):
        if exc.status_code < 500:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.get("/health", response_model=HealthResponse)
    async def health():
        return HealthResponse()

    @app.post("/api/images", response_model=BrandedImageResponse, responses=ERROR_RESPONSES)
    async def brand_image(request: Request):
        """Brand an uploaded image with the logo and optional caption.

        Multipart fields: ``image`` (file, required), ``width`` and
        ``height`` (both or neither, 1-16384), ``darken`` (``true``),
        ``text``, ``textcolor`` (``white``|``black``), ``textsize``
        (``small``|``medium``|``large``), ``logocolor`` (``white``|``black``)
        and ``logoposition`` (``top-left``|``top-right``|``bottom-left``|
        ``bottom-right``). Unknown option values fall back to their defaults.
        """
        settings: Settings = request.app.state.settings
        authorization = request.headers.get("authorization")
        # Reject before buffering the upload.
        authenticate(settings, authorization)
        form = await request.form()
        upload = await _read_upload(form.get("image"))
        fields = {key: value for key, value in form.items() if not isinstance(value, StarletteUploadFile)}
        public_base = settings.public_url or f"{str(request.base_url).rstrip('/')}{STORAGE_ROUTE}"
        url = await run_in_threadpool(
            process_image,
            settings,
            authorization,
            upload,
            fields,
            public_base,
        )
        return BrandedImageResponse(url=url)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.host, port=settings.port)
