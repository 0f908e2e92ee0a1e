from typing import List, Optional
from pydantic_settings import BaseSettings
from urllib.parse import quote_plus

class Settings(BaseSettings):
    ENV: str = "local"

    postgres_user: str = "studiodrop"
    postgres_password: str = ""
    postgres_db: str = "studiodrop"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # full URL wins over the postgres_* parts (sqlite for tests)
    DATABASE_URL: Optional[str] = None

    STRIPE_SECRET_KEY: str = ""
    STRIPE_PUBLISHABLE_KEY: str = ""
    STRIPE_CURRENCY: str = "usd"
    VERIFY_PAYMENT_ON_ORDER: bool = False

    USPS_CLIENT_ID: Optional[str] = None
    USPS_CLIENT_SECRET: Optional[str] = None
    USPS_API_BASE: str = "https://apis.usps.com"
    USPS_TIMEOUT_SECONDS: float = 10.0

    SHIPPING_ORIGIN_ZIP: str = "10001"
    TAX_RATE: float = 0.08

    STORE_NAME: str = "StudioDrop"
    STORE_TAGLINE: str = "Limited-edition artwork drops"
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    @property
    def database_url(self):
        if self.DATABASE_URL:
            return self.DATABASE_URL
        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()
