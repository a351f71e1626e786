from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_AUDIO_TYPES = [
    "audio/mpeg",
    "audio/mp3",
    "audio/mpga",
    "audio/ogg",
    "audio/oga",
    "audio/opus",
    "audio/wav",
    "audio/x-wav",
    "audio/wave",
    "audio/vnd.wave",
    "audio/webm",
    "video/webm",
    "audio/mp4",
    "audio/m4a",
    "audio/x-m4a",
    "video/mp4",
    "audio/flac",
    "audio/x-flac",
]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    api_version: str = "1.0.0"
    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

    # Provider credentials; the SDKs also read OPENAI_API_KEY / GOOGLE_API_KEY themselves
    openai_api_key: Optional[str] = None
    google_api_key: Optional[str] = None

    transcription_model: str = "whisper-1"
    llm_model: str = "gemini-2.0-flash"
    llm_temperature: float = 0.4
    prompt_version: str = "v2"

    # Upload handling
    max_upload_bytes: int = 25 * 1024 * 1024
    allowed_content_types: List[str] = DEFAULT_AUDIO_TYPES
    upload_dir: Optional[str] = None


settings = Settings()
