from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from sqlalchemy import text
from sqlalchemy.orm import Session

from txproof.config import settings
from txproof.db import get_db

router = APIRouter(tags=["public"])


@router.get("/")
def root():
    return {"ok": True, "service": "txproof", "hash_alg": settings.hash_alg}


@router.get("/health")
def health():
    return {"ok": True}


@router.get("/ready")
def ready(db: Session = Depends(get_db)):
    # verify DB
    db.execute(text("SELECT 1"))
    return {"ok": True}


@router.get("/metrics")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
