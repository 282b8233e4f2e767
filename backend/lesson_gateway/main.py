import asyncio
import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .context import GatewayContext, build_context
from .errors import GatewayError, ValidationError
from .settings import settings
from .routers import audio, diagram, doubt, health, lesson, transcribe

logger = logging.getLogger(__name__)


def _error_body(message: str, details, *, production: bool) -> dict:
	body = {"error": message}
	if details and not production:
		body["details"] = details
	return body


def _install_error_handlers(app: FastAPI) -> None:
	def production() -> bool:
		ctx: Optional[GatewayContext] = getattr(app.state, "context", None)
		return (ctx.settings if ctx else settings).is_production

	@app.exception_handler(ValidationError)
	async def _validation_error(request: Request, exc: ValidationError):
		# Validation messages are safe to show in every environment
		return JSONResponse(status_code=exc.status_code, content={"error": exc.message, "errors": exc.errors})

	@app.exception_handler(GatewayError)
	async def _gateway_error(request: Request, exc: GatewayError):
		logger.error("%s %s failed: %s: %s", request.method, request.url.path, type(exc).__name__, exc)
		return JSONResponse(
			status_code=exc.status_code,
			content=_error_body(exc.message, exc.detail, production=production()),
		)

	@app.exception_handler(RequestValidationError)
	async def _malformed_body(request: Request, exc: RequestValidationError):
		errors = [f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()]
		return JSONResponse(status_code=400, content={"error": ValidationError.message, "errors": errors})

	@app.exception_handler(Exception)
	async def _unhandled(request: Request, exc: Exception):
		logger.exception("Unhandled error on %s %s", request.method, request.url.path)
		return JSONResponse(
			status_code=500,
			content=_error_body("Internal server error", str(exc), production=production()),
		)


def create_app(context: Optional[GatewayContext] = None) -> FastAPI:
	app = FastAPI(title="Lesson Gateway API")
	app.state.context = context
	app.state.sweepers = []

	app.add_middleware(
		CORSMiddleware,
		allow_origins=(context.settings if context else settings).cors_origin_list,
		allow_methods=["*"],
		allow_headers=["*"],
	)
	_install_error_handlers(app)

	app.include_router(health.router)
	app.include_router(lesson.router)
	app.include_router(doubt.router)
	app.include_router(audio.router)
	app.include_router(diagram.router)
	app.include_router(transcribe.router)

	@app.on_event("startup")
	async def startup_event():
		if app.state.context is None:
			app.state.context = build_context(settings)
		ctx: GatewayContext = app.state.context
		# Expired entries are already invisible to reads; sweeping only bounds memory
		sweepers: List[asyncio.Task] = [asyncio.create_task(cache.store.sweep_forever()) for cache in ctx.caches()]
		app.state.sweepers = sweepers
		logger.info(
			"Lesson gateway started: text=%s image=%s hash=%s",
			ctx.text_model.label,
			ctx.image_model.label,
			ctx.keys.hash_name,
		)

	@app.on_event("shutdown")
	async def shutdown_event():
		for task in app.state.sweepers:
			task.cancel()
		await asyncio.gather(*app.state.sweepers, return_exceptions=True)
		app.state.sweepers = []
		if app.state.context is not None:
			await app.state.context.aclose()

	return app


logging.basicConfig(
	level=getattr(logging, settings.log_level.upper(), logging.INFO),
	format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()
