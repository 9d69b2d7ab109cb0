"""Virtual backend configuration."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings read from the environment or a local ``.env`` file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "denuncias-virtual-backend"
    debug: bool = False
    api_prefix: str = ""

    # Sessions (signed bearer tokens)
    jwt_secret: str = "virtual-backend-dev-secret"
    jwt_algorithm: str = "HS256"
    session_expire_minutes: int = 60
    enforce_session_expiry: bool = True

    # Seed users and password hashing
    bcrypt_rounds: int = 12
    seed_password: str = "password"

    @field_validator("bcrypt_rounds")
    @classmethod
    def check_bcrypt_rounds(cls, v: int) -> int:
        # bcrypt accepts cost factors 4..31
        if not 4 <= v <= 31:
            raise ValueError("bcrypt_rounds must be between 4 and 31")
        return v


settings = Settings()
