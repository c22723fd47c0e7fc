import os
from functools import lru_cache

# Prefer loading environment variables from a .env file if python-dotenv is available
try:
    from dotenv import load_dotenv, find_dotenv
    _env_path = find_dotenv(usecwd=True)
    if _env_path:
        load_dotenv(_env_path, override=False)
except ImportError:
    pass


class Settings:
    SECRET_KEY: str = os.getenv("SECRET_KEY", "change_me_secret")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    # Default to 7 days so users stay logged in for a week
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(7 * 24 * 60)))
    DATABASE_URL: str = os.getenv("DATABASE_URL")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    # Comma separated list of browser origins allowed by CORS
    ALLOWED_ORIGINS: str = os.getenv(
        "ALLOWED_ORIGINS", "https://mirakle-admin.vercel.app,https://mirakle-client.vercel.app"
    )
    MEDIA_ROOT: str = os.getenv("MEDIA_ROOT", "")

    # Admin identities; ADMIN_EMAILS is an optional comma separated list
    ADMIN_EMAIL: str = os.getenv("ADMIN_EMAIL", "")
    ADMIN_EMAILS: str = os.getenv("ADMIN_EMAILS", "")

    # Outgoing mail
    CONTACT_EMAIL: str = os.getenv("CONTACT_EMAIL", "")
    CONTACT_PASSWORD: str = os.getenv("CONTACT_PASSWORD", "")
    CONTACT_INBOX: str = os.getenv("CONTACT_INBOX", "")
    SMTP_SERVER: str = os.getenv("SMTP_SERVER", "smtp.gmail.com")
    SMTP_PORT: int = int(os.getenv("SMTP_PORT", "587"))
    EMAIL_BACKEND: str = os.getenv("EMAIL_BACKEND", "console").lower()
    ENABLE_EMAIL_NOTIFICATIONS: bool = bool(int(os.getenv("ENABLE_EMAIL_NOTIFICATIONS", "1")))
    OTP_EXPIRE_MINUTES: int = int(os.getenv("OTP_EXPIRE_MINUTES", "10"))

    # Razorpay
    RAZORPAY_KEY_ID: str = os.getenv("RAZORPAY_KEY_ID", "")
    RAZORPAY_KEY_SECRET: str = os.getenv("RAZORPAY_KEY_SECRET", "")
    RAZORPAY_API_URL: str = os.getenv("RAZORPAY_API_URL", "https://api.razorpay.com/v1")

    GOOGLE_MAPS_API_KEY: str = os.getenv("GOOGLE_MAPS_API_KEY", "")
    GEOCODE_API_URL: str = os.getenv("GEOCODE_API_URL", "https://maps.googleapis.com/maps/api/geocode/json")
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", "10"))

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in (self.ALLOWED_ORIGINS or "").split(",") if o.strip()]

    @property
    def admin_emails(self) -> set[str]:
        emails = {e.strip().lower() for e in (self.ADMIN_EMAILS or "").split(",") if e.strip()}
        if self.ADMIN_EMAIL:
            emails.add(self.ADMIN_EMAIL.strip().lower())
        return emails


@lru_cache
def get_settings():
    return Settings()
