from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Model to use for roadmap generation
	gemini_model: str = Field(default="gemini-2.0-flash", validation_alias="GEMINI_MODEL")
	# Google AI Studio (Generative Language API) root; the model and ":generateContent" are appended
	gemini_base_url: str = Field(
		default="https://generativelanguage.googleapis.com/v1beta/models",
		validation_alias="GEMINI_BASE_URL",
	)

	# Reject model output that does not look like a roadmap (off by default: output is passed through)
	strict_schema: bool = Field(default=False, validation_alias="ROADMAP_STRICT_SCHEMA")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()


def get_settings() -> Settings:
	return settings
