from datetime import datetime, timedelta, timezone
from typing import Optional
from fastapi import HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import logging
import uuid

import bcrypt
from jose import jwt, JWTError

from app.config import get_settings
from app.models.user import User, TokenBlacklist, SessionLocal, get_db
from app.utils.errors import NotAuthenticated

logger = logging.getLogger(__name__)
settings = get_settings()

http_bearer = HTTPBearer(auto_error=False)


# ===== Passwords =====
def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# ===== JWT helpers =====
def create_access_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    jti = uuid.uuid4().hex
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {"sub": subject, "exp": expire, "iat": now, "nbf": now, "jti": jti}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise NotAuthenticated("Invalid token.")


def is_token_blacklisted(jti: str) -> bool:
    db = SessionLocal()
    try:
        return db.query(TokenBlacklist).filter(TokenBlacklist.jti == jti).first() is not None
    finally:
        db.close()


def blacklist_token(jti: str) -> None:
    db = SessionLocal()
    try:
        if not db.query(TokenBlacklist).filter(TokenBlacklist.jti == jti).first():
            db.add(TokenBlacklist(jti=jti))
            db.commit()
    finally:
        db.close()


def get_current_user_email(token: HTTPAuthorizationCredentials = Depends(http_bearer)) -> str:
    if not token or not token.credentials:
        raise NotAuthenticated("Access denied. No token provided.")
    payload = decode_access_token(token.credentials)
    jti = payload.get("jti")
    if not jti or is_token_blacklisted(jti):
        raise NotAuthenticated("Token revoked")
    email = payload.get("sub")
    if not email:
        raise NotAuthenticated("Invalid token payload")
    return email


def get_current_user(
    current_user_email: str = Depends(get_current_user_email),
    db: Session = Depends(get_db),
) -> User:
    user = db.query(User).filter(User.email == current_user_email).first()
    if not user:
        raise NotAuthenticated("Invalid user")
    return user


def is_admin_email(email: str) -> bool:
    if not email:
        return False
    return email.lower() in settings.admin_emails


def is_admin(user: User) -> bool:
    return user.role == "ADMIN" or is_admin_email(user.email)


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not is_admin(user):
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


# ===== Email =====
def _send_email_console(to_email: str, subject: str, body: str):
    # Development helper: logs the email content instead of sending
    logger.info("[EMAIL:console] To=%s Subject=%s Body=%s", to_email, subject, body)


def send_email(to_email: str, subject: str, body: str, html: Optional[str] = None, reply_to: Optional[str] = None):
    """Send an email using configured backend.

    In development (EMAIL_BACKEND=console), the email is logged instead of sent.
    In SMTP mode, errors are logged and won't raise to callers to avoid 500s.
    """
    backend = (settings.EMAIL_BACKEND or "console").lower()
    sender = settings.CONTACT_EMAIL
    password = settings.CONTACT_PASSWORD

    if backend != "smtp" or not sender or not password:
        if backend == "smtp":
            logger.warning(
                "EMAIL_BACKEND=smtp but credentials missing (CONTACT_EMAIL set=%s, password length=%s). Falling back to console.",
                bool(sender), len(password or "")
            )
        _send_email_console(to_email, subject, body)
        return True

    try:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = sender
        msg["To"] = to_email
        if reply_to:
            msg["Reply-To"] = reply_to
        msg.attach(MIMEText(body, "plain"))
        if html:
            msg.attach(MIMEText(html, "html"))

        logger.debug("Attempting SMTP connection to %s:%s", settings.SMTP_SERVER, settings.SMTP_PORT)
        with smtplib.SMTP(settings.SMTP_SERVER, settings.SMTP_PORT, timeout=20) as server:
            server.starttls()
            server.login(sender, password)
            server.send_message(msg)
        logger.info("Email sent via SMTP to %s", to_email)
        return True
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email via SMTP: %s", e, exc_info=True)
        _send_email_console(to_email, subject, body)
        return False


def notify(to_email: str, template: dict, **kwargs) -> bool:
    """Send a rendered template if notifications are enabled."""
    if not settings.ENABLE_EMAIL_NOTIFICATIONS:
        return False
    return send_email(to_email, template["subject"], template["body"], html=template.get("html"), **kwargs)
