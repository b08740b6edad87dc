import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from txproof.config import settings
from txproof.routers.public import router as public_router
from txproof.routers.blocks import router as blocks_router
from txproof.routers.proofs import router as proofs_router
from txproof.db import init_db
from txproof.middleware import RequestIdMiddleware

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="TxProof",
    version="1.0.0",
    docs_url="/docs",
    redoc_url=None,
)

app.add_middleware(RequestIdMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(public_router)
app.include_router(blocks_router)
app.include_router(proofs_router)


@app.on_event("startup")
def _startup():
    init_db()
