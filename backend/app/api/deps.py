from typing import Iterator

from fastapi import Request
from sqlalchemy.orm import Session

from app.db.session import Store
from app.services.qr import QREncoder

def get_store(request: Request) -> Store:
    return request.app.state.store

def get_db(request: Request) -> Iterator[Session]:
    db = get_store(request).session()
    try:
        yield db
    finally:
        db.close()

def get_qr_encoder(request: Request) -> QREncoder:
    return request.app.state.qr_encoder
