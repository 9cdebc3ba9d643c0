import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..errors import StorageError
from ..storage import AssetStorage

logger = logging.getLogger(__name__)


def commit_file_replacement(
    db: Session,
    storage: AssetStorage,
    record,
    old_reference: str | None,
    new_reference: str,
    previous: dict,
) -> None:
    """Commit a record that now points at ``new_reference``, then delete the
    file it pointed at before.

    The old file survives until the commit succeeds. When the old file cannot
    be deleted, ``previous`` is written back and the new file discarded, so the
    record and its file stay as they were.
    """
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        storage.discard(new_reference)
        raise

    if not old_reference:
        return
    try:
        storage.delete(old_reference)
    except StorageError:
        for field, value in previous.items():
            setattr(record, field, value)
        db.commit()
        storage.discard(new_reference)
        logger.warning(f"Kept {old_reference}, replacement {new_reference} discarded")
        raise
