from fastapi import APIRouter, Query

from app.services.geocoding import reverse_geocode


router = APIRouter()


@router.get("/reverse-geocode")
def reverse_geocode_lookup(lat: float = Query(..., ge=-90, le=90), lng: float = Query(..., ge=-180, le=180)):
    return reverse_geocode(lat, lng)
