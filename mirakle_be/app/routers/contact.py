from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from app.config import get_settings
from app.models.contact import ContactMessage
from app.models.user import User, get_db
from app.schemas.contact import ContactIn, ContactOut, ContactListOut, ContactStatusUpdate
from app.utils.email_templates import contact_notification
from app.utils.errors import NotFound
from app.utils.security import require_admin, notify

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_out(m: ContactMessage) -> ContactOut:
    return ContactOut(
        id=m.id,
        name=m.name,
        email=m.email,
        message=m.message,
        status=m.status or "unread",
        createdAt=m.created_at,
    )


@router.post("")
def submit_message(payload: ContactIn, db: Session = Depends(get_db)):
    message = ContactMessage(name=payload.name.strip(), email=payload.email, message=payload.message.strip())
    db.add(message)
    db.commit()
    db.refresh(message)

    inbox = get_settings().CONTACT_INBOX
    if inbox:
        # Delivery failures are logged by send_email and never fail the request
        notify(inbox, contact_notification(message.name, message.email, message.message), reply_to=message.email)
    else:
        logger.debug("CONTACT_INBOX not set; skipping notification for message %s", message.id)
    return {"success": True, "message": "Message saved successfully"}


@router.get("", response_model=ContactListOut)
def list_messages(db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    messages = db.query(ContactMessage).order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc()).all()
    return ContactListOut(messages=[_to_out(m) for m in messages])


@router.put("/{id}/status", response_model=ContactOut)
def update_status(id: int, payload: ContactStatusUpdate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    message = db.query(ContactMessage).filter(ContactMessage.id == id).first()
    if not message:
        raise NotFound("Message not found")
    message.status = payload.status
    db.commit()
    db.refresh(message)
    return _to_out(message)
