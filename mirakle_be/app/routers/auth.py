from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from datetime import datetime, timedelta, timezone
import logging
import secrets

from app.config import get_settings
from app.models.user import User, OTP, get_db
from app.schemas.user import (
    EmailSchema,
    OtpVerifySchema,
    SignupSchema,
    LoginSchema,
    LoginOut,
    UserOut,
    PasswordResetSchema,
)
from app.utils.errors import NotAuthenticated
from app.utils.security import (
    create_access_token,
    decode_access_token,
    blacklist_token,
    hash_password,
    verify_password,
    is_admin,
    require_admin,
    http_bearer,
    notify,
)
from app.utils.email_templates import signup_otp, welcome_email, password_reset_code, password_reset_success

logger = logging.getLogger(__name__)

router = APIRouter()

MIN_PASSWORD_LENGTH = 6


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _issue_otp(db: Session, email: str, purpose: str) -> str:
    """Store a fresh code for (email, purpose), invalidating earlier ones and purging expired rows."""
    now = datetime.utcnow()
    db.query(OTP).filter(OTP.expires_at < now).delete(synchronize_session=False)
    db.query(OTP).filter(OTP.email == email, OTP.purpose == purpose, OTP.used == False).update(  # noqa: E712
        {OTP.used: True}, synchronize_session=False
    )
    code = f"{secrets.randbelow(1_000_000):06d}"
    expires_at = now + timedelta(minutes=get_settings().OTP_EXPIRE_MINUTES)
    db.add(OTP(email=email, purpose=purpose, code=code, expires_at=expires_at))
    db.commit()
    return code


def _find_live_otp(db: Session, email: str, purpose: str, **filters):
    query = db.query(OTP).filter(
        OTP.email == email,
        OTP.purpose == purpose,
        OTP.used == False,  # noqa: E712
        OTP.expires_at >= datetime.utcnow(),
    )
    for field, value in filters.items():
        query = query.filter(getattr(OTP, field) == value)
    return query.order_by(OTP.created_at.desc()).first()


def to_user_out(user: User) -> UserOut:
    return UserOut(id=user.id, name=user.name, email=user.email, isAdmin=is_admin(user))


@router.post("/send-otp")
def send_otp(payload: EmailSchema, db: Session = Depends(get_db)):
    email = _normalize_email(payload.email)
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="User already exists")
    code = _issue_otp(db, email, "signup")
    notify(email, signup_otp(code, get_settings().OTP_EXPIRE_MINUTES))
    logger.info("Signup OTP issued for %s", email)
    return {"message": "OTP sent"}


@router.post("/verify-otp")
def verify_otp(payload: OtpVerifySchema, db: Session = Depends(get_db)):
    email = _normalize_email(payload.email)
    otp = _find_live_otp(db, email, "signup", code=payload.otp.strip())
    if not otp:
        raise HTTPException(status_code=400, detail="Invalid or expired OTP")
    otp.verified = True
    db.commit()
    return {"message": "Email verified"}


@router.post("/signup", status_code=201)
def signup(payload: SignupSchema, db: Session = Depends(get_db)):
    email = _normalize_email(payload.email)
    if len(payload.password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="Password too short")
    if db.query(User).filter(User.email == email).first():
        raise HTTPException(status_code=400, detail="User already exists")
    otp = _find_live_otp(db, email, "signup", verified=True)
    if not otp:
        raise HTTPException(status_code=400, detail="Email not verified")

    user = User(name=payload.name.strip(), email=email, password=hash_password(payload.password))
    otp.used = True
    db.add(user)
    db.commit()
    db.refresh(user)
    notify(user.email, welcome_email(user.name))
    logger.info("User %s registered", user.id)
    return {"message": "User created successfully"}


@router.post("/login", response_model=LoginOut)
def login(credentials: LoginSchema, db: Session = Depends(get_db)):
    email = _normalize_email(credentials.email)
    user = db.query(User).filter(User.email == email).first()
    if not user or not verify_password(credentials.password, user.password):
        raise HTTPException(status_code=400, detail="Invalid credentials")
    token = create_access_token(subject=user.email)
    return LoginOut(token=token, user=to_user_out(user))


@router.post("/logout")
def logout(creds: HTTPAuthorizationCredentials = Depends(http_bearer)):
    if not creds or not creds.credentials:
        raise NotAuthenticated()
    try:
        payload = decode_access_token(creds.credentials)
    except NotAuthenticated:
        # Respond 200 for bad tokens too, to avoid token probing
        return {"message": "Logged out"}
    jti = payload.get("jti")
    if jti:
        blacklist_token(jti)
    return {"message": "Logged out"}


@router.get("/validate-token")
def validate_token(
    creds: HTTPAuthorizationCredentials = Depends(http_bearer),
    admin: User = Depends(require_admin),
):
    """Lets the admin panel check a stored token before using it."""
    payload = decode_access_token(creds.credentials)
    return {
        "message": "Token is valid",
        "user": to_user_out(admin),
        "tokenExpiry": datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    }


@router.post("/password/forgot")
def forgot_password(payload: EmailSchema, db: Session = Depends(get_db)):
    """Email a reset code. Always returns the same message so user existence is not leaked."""
    email = _normalize_email(payload.email)
    user = db.query(User).filter(User.email == email).first()
    if user:
        code = _issue_otp(db, email, "reset")
        notify(email, password_reset_code(code, get_settings().OTP_EXPIRE_MINUTES))
    return {"message": "If that email exists, a reset code was sent"}


@router.post("/password/reset")
def reset_password(payload: PasswordResetSchema, db: Session = Depends(get_db)):
    email = _normalize_email(payload.email)
    if len(payload.newPassword) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="Password too short")
    user = db.query(User).filter(User.email == email).first()
    otp = _find_live_otp(db, email, "reset", code=payload.code.strip()) if user else None
    if not otp:
        raise HTTPException(status_code=400, detail="Invalid or expired code")
    otp.used = True
    user.password = hash_password(payload.newPassword)
    db.commit()
    notify(email, password_reset_success())
    return {"message": "Password reset successful"}
