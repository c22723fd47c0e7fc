from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.models.user import User, get_db
from app.routers.auth import MIN_PASSWORD_LENGTH, to_user_out
from app.schemas.user import ProfileUpdate, UserOut, PasswordChange
from app.utils.security import get_current_user, hash_password, verify_password


router = APIRouter()


@router.get("/me", response_model=UserOut)
def get_profile(user: User = Depends(get_current_user)):
    return to_user_out(user)


@router.put("/me", response_model=UserOut)
def update_profile(payload: ProfileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if payload.name is not None:
        name = payload.name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Name cannot be empty")
        user.name = name
    db.commit()
    db.refresh(user)
    return to_user_out(user)


@router.put("/me/password")
def change_password(payload: PasswordChange, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if not verify_password(payload.currentPassword, user.password):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    if len(payload.newPassword or "") < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail="New password too short")
    user.password = hash_password(payload.newPassword)
    db.commit()
    return {"message": "Password updated"}
