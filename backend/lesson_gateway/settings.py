from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

DAY_SECONDS = 24 * 60 * 60
HOUR_SECONDS = 60 * 60


class Settings(BaseSettings):
	# "development" exposes error details in responses, "production" hides them
	app_env: str = Field(default="development", validation_alias="APP_ENV")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
	# Comma-separated list of allowed browser origins
	cors_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")

	# Text model family: "gemini" or "openrouter"; resolved once at startup
	text_model_family: str = Field(default="gemini", validation_alias="TEXT_MODEL_FAMILY")
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.5-flash", validation_alias="GEMINI_MODEL")
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="x-ai/grok-4-fast:free", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="Lesson Gateway", validation_alias="OPENROUTER_TITLE")

	# Image model family: "imagen" or "stability"
	image_model_family: str = Field(default="imagen", validation_alias="IMAGE_MODEL_FAMILY")
	imagen_model: str = Field(default="imagen-3.0-generate-002", validation_alias="IMAGEN_MODEL")
	stability_api_key: str | None = Field(default=None, validation_alias="STABILITY_API_KEY")
	stability_base_url: str = Field(
		default="https://api.stability.ai/v1/generation/stable-diffusion-xl-1024-v1-0/text-to-image",
		validation_alias="STABILITY_BASE_URL",
	)

	# Google Cloud speech services; falls back to Application Default Credentials
	gcp_credentials_path: str | None = Field(default=None, validation_alias="GOOGLE_APPLICATION_CREDENTIALS")

	upstream_timeout_seconds: float = Field(default=60.0, validation_alias="UPSTREAM_TIMEOUT_SECONDS")

	# Cache policy
	cache_key_hash: str = Field(default="rolling", validation_alias="CACHE_KEY_HASH")
	lesson_ttl_seconds: int = Field(default=7 * DAY_SECONDS, validation_alias="LESSON_TTL_SECONDS")
	diagram_ttl_seconds: int = Field(default=7 * DAY_SECONDS, validation_alias="DIAGRAM_TTL_SECONDS")
	standalone_audio_ttl_seconds: int = Field(default=DAY_SECONDS, validation_alias="STANDALONE_AUDIO_TTL_SECONDS")
	narration_audio_ttl_seconds: int = Field(default=HOUR_SECONDS, validation_alias="NARRATION_AUDIO_TTL_SECONDS")
	doubt_ttl_seconds: int = Field(default=HOUR_SECONDS, validation_alias="DOUBT_TTL_SECONDS")
	doubt_audio_ttl_seconds: int = Field(default=HOUR_SECONDS, validation_alias="DOUBT_AUDIO_TTL_SECONDS")

	# Narration
	max_narration_chars: int = Field(default=3000, validation_alias="MAX_NARRATION_CHARS")
	lesson_max_attempts: int = Field(default=2, validation_alias="LESSON_MAX_ATTEMPTS")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	@property
	def is_production(self) -> bool:
		return self.app_env.lower() == "production"

	@property
	def cors_origin_list(self) -> list[str]:
		return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
