from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "CartQL API"
    DATABASE_URL: str = "sqlite:///./cartql.db"
    SQL_ECHO: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Currency used for display formatting and checkout line items
    DEFAULT_CURRENCY: str = "USD"

    # Stripe
    STRIPE_SECRET_KEY: str = "sk_test_placeholder"
    CHECKOUT_SUCCESS_URL: str = "http://localhost:3000/thankyou?session_id={CHECKOUT_SESSION_ID}"
    CHECKOUT_CANCEL_URL: str = "http://localhost:3000/cart?cancelled=true"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
