from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Sender identity used when the datasource does not override it
    EMAIL_SENDER_ADDRESS_DEFAULT: str = "no-reply@notifications.example.com"
    EMAIL_SENDER_NAME_DEFAULT: str = "Notifications"

    # SendGrid v3 API
    SENDGRID_API_URL: str = "https://api.sendgrid.com"
    SENDGRID_TIMEOUT_SECONDS: float = 30.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
