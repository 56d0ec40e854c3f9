"""
Export history persistence.

Stores each ExportSnapshot as a JSON blob keyed by an auto-increment id and
the owning user. Rows are insert-only.
"""

import logging

from sqlalchemy.orm import Session, joinedload

from . import models
from .snapshot import ExportSnapshot, snapshot_payload

logger = logging.getLogger(__name__)


def save_export(db: Session, snapshot: ExportSnapshot) -> models.ExportHistory:
    """Persist a snapshot for its actor. Returns the stored row."""
    if snapshot.user_id is None:
        raise ValueError("Cannot save an export without a user")

    record = models.ExportHistory(
        user_id=snapshot.user_id,
        export_data=snapshot_payload(snapshot),
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("Saved export %s for user %s (%d lines, total %.2f)",
                record.id, snapshot.user_id, len(snapshot.selected_products), snapshot.total_price)
    return record


def list_exports(db: Session, user: models.User = None) -> list:
    """Exports newest first: every user's for admins (or user=None), else the user's own."""
    query = db.query(models.ExportHistory).options(joinedload(models.ExportHistory.user))
    if user is not None and not user.is_admin:
        query = query.filter(models.ExportHistory.user_id == user.id)
    return query.order_by(models.ExportHistory.created_at.desc(), models.ExportHistory.id.desc()).all()


def get_export(db: Session, export_id: int):
    return db.query(models.ExportHistory).options(
        joinedload(models.ExportHistory.user),
    ).filter(models.ExportHistory.id == export_id).first()


def export_to_dict(record: models.ExportHistory) -> dict:
    return {
        "id": record.id,
        "user_id": record.user_id,
        "username": record.user.username if record.user else None,
        "export_data": record.export_data,
        "created_at": record.created_at.isoformat() if record.created_at else None,
    }
