from __future__ import annotations
from fastapi import Request
from sqlalchemy.orm import Session
from txproof.models import AuditLog
from txproof.util import json_dumps


def audit(db: Session, actor: str, action: str, block_number: int | None, meta: dict, ip: str | None, ua: str | None):
    row = AuditLog(actor=actor, action=action, block_number=block_number, meta_json=json_dumps(meta), ip=ip, ua=ua)
    db.add(row)


def audit_request(db: Session, request: Request, action: str, block_number: int | None, meta: dict):
    ip = request.client.host if request.client else None
    audit(db, actor=ip or "anonymous", action=action, block_number=block_number, meta=meta, ip=ip, ua=request.headers.get("user-agent"))
