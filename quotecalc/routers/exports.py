"""
Export endpoints — snapshot the cart, keep history, download PDFs.

POST /api/exports              — snapshot the current cart and store it
GET  /api/exports              — export history (all for admins, own otherwise)
GET  /api/exports/{id}         — one stored export
GET  /api/exports/{id}/pdf     — PDF of a stored export
GET  /api/cart/pdf             — PDF of the live cart, without storing anything
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from .. import models, schemas
from ..auth import get_current_user
from ..database import get_db
from ..export_store import export_to_dict, get_export, list_exports, save_export
from ..pdf_generator import generate_quote_pdf, pdf_filename
from ..snapshot import build_snapshot, snapshot_from_payload
from .cart import load_cart

router = APIRouter(tags=["exports"])


def _pdf_response(snapshot) -> Response:
    pdf_bytes = generate_quote_pdf(snapshot)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="{pdf_filename(snapshot)}"',
        },
    )


@router.post("/exports")
def create_export(db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    """Snapshot the current cart into export history."""
    row, cart = load_cart(db, current_user)
    if len(cart) == 0:
        raise HTTPException(status_code=400, detail="Cart is empty — add products before exporting")

    snapshot = build_snapshot(cart, current_user)
    record = save_export(db, snapshot)
    return export_to_dict(record)


@router.get("/exports", response_model=List[schemas.ExportRecord])
def get_exports(db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    return [export_to_dict(r) for r in list_exports(db, current_user)]


def _get_visible_export(db: Session, export_id: int, user: models.User) -> models.ExportHistory:
    record = get_export(db, export_id)
    if not record:
        raise HTTPException(status_code=404, detail="Export not found")
    if record.user_id != user.id and not user.is_admin:
        raise HTTPException(status_code=403, detail="Not your export")
    return record


@router.get("/exports/{export_id}", response_model=schemas.ExportRecord)
def get_export_detail(export_id: int, db: Session = Depends(get_db),
                      current_user: models.User = Depends(get_current_user)):
    return export_to_dict(_get_visible_export(db, export_id, current_user))


@router.get("/exports/{export_id}/pdf")
def download_export_pdf(export_id: int, db: Session = Depends(get_db),
                        current_user: models.User = Depends(get_current_user)):
    """Re-render the PDF of a stored export. Returns: application/pdf"""
    record = _get_visible_export(db, export_id, current_user)
    snapshot = snapshot_from_payload(
        record.export_data,
        user_id=record.user_id,
        username=record.user.username if record.user else None,
    )
    return _pdf_response(snapshot)


@router.get("/cart/pdf")
def download_cart_pdf(db: Session = Depends(get_db), current_user: models.User = Depends(get_current_user)):
    """PDF of the live cart. Returns: application/pdf"""
    row, cart = load_cart(db, current_user)
    db.commit()
    if len(cart) == 0:
        raise HTTPException(status_code=400, detail="Cart is empty — add products before exporting")
    return _pdf_response(build_snapshot(cart, current_user))
