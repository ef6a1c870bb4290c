from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.api.deps import get_store
from app.core.errors import StoreFailure
from app.db.session import Store

router = APIRouter()

@router.get("/")
def health(store: Store = Depends(get_store)):
    try:
        store.ping()
    except SQLAlchemyError as e:
        raise StoreFailure("Database unavailable") from e
    return {"status": "ok"}
