from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.models.user import User, get_db
from app.models.address import Address
from app.schemas.address import AddressOut, AddressCreate, AddressUpdate, AddressListOut
from app.utils.errors import NotFound
from app.utils.security import get_current_user


router = APIRouter()


def _to_out(a: Address) -> AddressOut:
    return AddressOut(
        id=a.id,
        name=a.name,
        phone=a.phone,
        line1=a.line1,
        city=a.city,
        pincode=a.pincode,
        landmark=a.landmark,
        type=a.type or "HOME",
        isDefault=bool(a.is_default),
    )


def _list_out(db: Session, user_id: int, message: str | None = None) -> AddressListOut:
    addresses = (
        db.query(Address)
        .filter(Address.user_id == user_id)
        .order_by(Address.is_default.desc(), Address.created_at.desc(), Address.id.desc())
        .all()
    )
    return AddressListOut(message=message, addresses=[_to_out(a) for a in addresses])


def _maybe_clear_default(db: Session, user_id: int, keep_id: int | None = None):
    query = db.query(Address).filter(Address.user_id == user_id, Address.is_default == True)  # noqa: E712
    if keep_id is not None:
        query = query.filter(Address.id != keep_id)
    query.update({Address.is_default: False}, synchronize_session=False)


def _get_owned(db: Session, user_id: int, id: int) -> Address:
    address = db.query(Address).filter(Address.id == id, Address.user_id == user_id).first()
    if not address:
        raise NotFound("Address not found")
    return address


def _apply(address: Address, payload: AddressCreate | AddressUpdate) -> None:
    address.name = payload.name
    address.phone = payload.phone
    address.line1 = payload.line1
    address.city = payload.city
    address.pincode = payload.pincode
    address.landmark = payload.landmark
    address.type = payload.type
    address.is_default = payload.isDefault


@router.get("", response_model=AddressListOut)
def get_user_addresses(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return _list_out(db, user.id)


@router.post("", response_model=AddressListOut, status_code=201)
def create_address(payload: AddressCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    if payload.isDefault:
        _maybe_clear_default(db, user.id)
    address = Address(user_id=user.id)
    _apply(address, payload)
    db.add(address)
    db.commit()
    return _list_out(db, user.id, "Address added")


@router.put("/{id}", response_model=AddressListOut)
def update_address(id: int, payload: AddressUpdate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    address = _get_owned(db, user.id, id)
    if payload.isDefault:
        _maybe_clear_default(db, user.id, keep_id=address.id)
    _apply(address, payload)
    db.commit()
    return _list_out(db, user.id, "Address updated")


@router.delete("/{id}", response_model=AddressListOut)
def delete_address(id: int, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    address = _get_owned(db, user.id, id)
    db.delete(address)
    db.commit()
    return _list_out(db, user.id, "Address deleted")
