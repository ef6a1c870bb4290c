import logging

from app.db.session import Store
from app.models import Base

logger = logging.getLogger(__name__)

def create_tables(store: Store) -> None:
    """Create missing tables. Dev/test convenience; deployed databases use Alembic."""
    Base.metadata.create_all(bind=store.engine)
    logger.info("Ensured tables: %s", ", ".join(sorted(Base.metadata.tables)))
