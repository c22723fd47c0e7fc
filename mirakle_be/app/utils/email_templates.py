from html import escape
from typing import Dict

APP_NAME = "Mirakle"


def signup_otp(code: str, expire_minutes: int) -> Dict[str, str]:
    subject = f"Your {APP_NAME} verification code"
    body = (
        f"Use this code to verify your email: {code}\n"
        f"This code will expire in {expire_minutes} minutes. If you did not sign up, you can ignore this email.\n\n"
        f"-- The {APP_NAME} Team"
    )
    return {"subject": subject, "body": body}


def welcome_email(name: str | None) -> Dict[str, str]:
    name = name or "there"
    subject = f"Welcome to {APP_NAME}!"
    body = (
        f"Hi {name},\n\n"
        f"Thanks for creating your {APP_NAME} account. We're excited to have you on board.\n"
        "You can start browsing products and placing orders right away.\n\n"
        "Happy shopping!\n"
        f"-- The {APP_NAME} Team"
    )
    return {"subject": subject, "body": body}


def password_reset_code(code: str, expire_minutes: int) -> Dict[str, str]:
    subject = "Your Password Reset Code"
    body = (
        "We received a request to reset your password.\n\n"
        f"Use this code: {code}\n"
        f"This code will expire in {expire_minutes} minutes. If you did not request a reset, you can ignore this email.\n\n"
        f"-- The {APP_NAME} Team"
    )
    return {"subject": subject, "body": body}


def password_reset_success() -> Dict[str, str]:
    subject = "Your Password Has Been Reset"
    body = (
        "This is a confirmation that your password was successfully reset.\n"
        "If you did not perform this action, contact support immediately."
    )
    return {"subject": subject, "body": body}


def contact_notification(name: str, email: str, message: str) -> Dict[str, str]:
    subject = f"New Contact Message from {name}"
    body = f"Name: {name}\nEmail: {email}\n\n{message}"
    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<h2 style="color: #333;">New Contact Form Submission</h2>'
        f"<p><strong>Name:</strong> {escape(name)}</p>"
        f"<p><strong>Email:</strong> {escape(email)}</p>"
        "<p><strong>Message:</strong></p>"
        f"<div>{escape(message).replace(chr(10), '<br>')}</div>"
        "</div>"
    )
    return {"subject": subject, "body": body, "html": html}
