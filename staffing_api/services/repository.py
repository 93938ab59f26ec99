"""
Thin persistence gateway over the Flask-SQLAlchemy models.

Every helper returns a ``GatewayResult`` so callers can branch on
``status`` the same way for reads and writes. Rows of models that carry a
``deleted_at`` column are treated as soft-deleted once it is set and are
never returned or counted. Nothing here commits; the caller owns the
transaction.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from staffing_api.extensions import db


@dataclass
class GatewayResult:
    status: bool
    data: Any = field(default_factory=list)
    error: str | None = None


def _live_query(model, condition: dict | None):
    q = model.query
    if hasattr(model, "deleted_at"):
        q = q.filter(model.deleted_at.is_(None))
    if condition:
        q = q.filter_by(**condition)
    return q


def find(model, condition: dict | None = None, order_by=None, limit: int | None = None) -> GatewayResult:
    q = _live_query(model, condition)
    q = q.order_by(order_by if order_by is not None else model.id.asc())
    if limit:
        q = q.limit(limit)
    rows = q.all()
    return GatewayResult(status=bool(rows), data=rows)


def count(model, condition: dict | None = None) -> GatewayResult:
    return GatewayResult(status=True, data=_live_query(model, condition).count())


def store(model, row: dict) -> GatewayResult:
    obj = model(**row)
    db.session.add(obj)
    db.session.flush()
    return GatewayResult(status=True, data=[obj])


def update(model, condition: dict, row: dict) -> GatewayResult:
    rows = _live_query(model, condition).all()
    for obj in rows:
        for k, v in row.items():
            setattr(obj, k, v)
    db.session.flush()
    return GatewayResult(status=bool(rows), data=rows)
