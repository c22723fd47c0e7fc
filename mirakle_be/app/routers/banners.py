from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Form
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from app.models.banner import Banner, BANNER_KINDS
from app.models.user import User, get_db
from app.schemas.banner import BannerOut
from app.utils.errors import NotFound
from app.utils.security import require_admin
from app.utils.storage import save_upload_file, delete_media_file

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_kind(kind: str) -> str:
    if kind not in BANNER_KINDS:
        raise NotFound(f"Unknown banner type: {kind}")
    return kind


def _to_out(b: Banner) -> BannerOut:
    return BannerOut(
        id=b.id,
        kind=b.kind,
        title=b.title,
        imageUrl=b.image_url,
        linkUrl=b.link_url,
        createdAt=b.created_at,
    )


@router.get("/{kind}", response_model=List[BannerOut])
def get_banners(kind: str, db: Session = Depends(get_db)):
    _check_kind(kind)
    banners = (
        db.query(Banner)
        .filter(Banner.kind == kind)
        .order_by(Banner.created_at.desc(), Banner.id.desc())
        .all()
    )
    return [_to_out(b) for b in banners]


@router.post("/{kind}", response_model=BannerOut, status_code=201)
def upload_banner(
    kind: str,
    image: UploadFile = File(None),
    title: Optional[str] = Form(None),
    linkUrl: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    _check_kind(kind)
    if not image or not image.filename:
        raise HTTPException(status_code=400, detail="No image uploaded")
    try:
        image_url = save_upload_file(image, subdir=f"banners/{kind}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    banner = Banner(kind=kind, title=title, image_url=image_url, link_url=linkUrl)
    db.add(banner)
    db.commit()
    db.refresh(banner)
    return _to_out(banner)


@router.delete("/{kind}/{id}")
def delete_banner(kind: str, id: int, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    _check_kind(kind)
    banner = db.query(Banner).filter(Banner.id == id, Banner.kind == kind).first()
    if not banner:
        raise NotFound("Banner not found")
    delete_media_file(banner.image_url)
    db.delete(banner)
    db.commit()
    return {"message": "Banner deleted successfully"}


@router.put("/{kind}/{id}", response_model=BannerOut)
def update_banner(
    kind: str,
    id: int,
    image: UploadFile = File(None),
    title: Optional[str] = Form(None),
    linkUrl: Optional[str] = Form(None),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Update title/link; a new image replaces the stored file."""
    _check_kind(kind)
    banner = db.query(Banner).filter(Banner.id == id, Banner.kind == kind).first()
    if not banner:
        raise NotFound("Banner not found")
    if image and image.filename:
        try:
            image_url = save_upload_file(image, subdir=f"banners/{kind}")
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        delete_media_file(banner.image_url)
        banner.image_url = image_url
    if title is not None:
        banner.title = title
    if linkUrl is not None:
        banner.link_url = linkUrl
    db.commit()
    db.refresh(banner)
    return _to_out(banner)


@router.delete("/{kind}")
def delete_all_banners(kind: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    _check_kind(kind)
    banners = db.query(Banner).filter(Banner.kind == kind).all()
    for banner in banners:
        delete_media_file(banner.image_url)
        db.delete(banner)
    db.commit()
    logger.info("Deleted %d %s banner(s) by %s", len(banners), kind, admin.email)
    return {"message": "All banners deleted successfully", "deleted": len(banners)}
