from fastapi import APIRouter, Depends

from ..context import GatewayContext
from .deps import get_context

router = APIRouter(tags=["health"])


@router.get("/info")
def info(ctx: GatewayContext = Depends(get_context)):
	return {
		"status": "ok",
		"env": ctx.settings.app_env,
		"textModel": ctx.text_model.label,
		"imageModel": ctx.image_model.label,
		"cacheKeyHash": ctx.keys.hash_name,
		"cachedEntries": {cache.store.name: cache.store.keys() for cache in ctx.caches()},
	}
