from pydantic import BaseModel, EmailStr, Field


class EmailSchema(BaseModel):
    email: EmailStr


class OtpVerifySchema(BaseModel):
    email: EmailStr
    otp: str


class SignupSchema(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str


class LoginSchema(BaseModel):
    email: EmailStr
    password: str


class PasswordResetSchema(BaseModel):
    email: EmailStr
    code: str
    newPassword: str


class UserOut(BaseModel):
    id: int
    name: str
    email: EmailStr
    isAdmin: bool = False


class LoginOut(BaseModel):
    token: str
    user: UserOut


class ProfileUpdate(BaseModel):
    name: str | None = None


class PasswordChange(BaseModel):
    currentPassword: str
    newPassword: str
