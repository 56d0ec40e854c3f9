from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./quotecalc.db"
    COMPANY_NAME: str = "Product Calculator"
    CURRENCY: str = "EUR"

    # Auth
    JWT_SECRET: str = ""  # REQUIRED in production; auth fails loudly when unset
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_EXPIRE_MINUTES: int = 60 * 24

    # First admin account, created on startup when the users table is empty
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = ""

    CORS_ORIGINS: list[str] = ["*"]

    class Config:
        env_file = ".env"


settings = Settings()
