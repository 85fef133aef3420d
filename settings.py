# settings.py
import os
from typing import List

from pydantic import BaseModel, ConfigDict, field_validator

SESSION_MODES = ("stateless", "stateful")


class Settings(BaseModel):
    # env-provided defaults go through the validators too
    model_config = ConfigDict(validate_default=True)

    API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    MODEL_NAME: str = os.getenv("MODEL_NAME", "gemini-2.0-flash")
    SESSION_MODE: str = os.getenv("SESSION_MODE", "stateful")
    SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "part_session")
    CORS_ALLOW_ORIGINS: str = os.getenv("CORS_ALLOW_ORIGINS", "*")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    PORT: int = int(os.getenv("PORT", "5000"))

    @field_validator("SESSION_MODE")
    @classmethod
    def check_session_mode(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in SESSION_MODES:
            raise ValueError(f"SESSION_MODE must be one of {', '.join(SESSION_MODES)}")
        return value

    @property
    def stateful(self) -> bool:
        return self.SESSION_MODE == "stateful"

    @property
    def cors_origins(self) -> List[str]:
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]
