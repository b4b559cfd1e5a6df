"""
Schema capability checks for the ``patients.photo`` column.

Older deployments created the photo column as a PostgreSQL large-object
reference (``oid``) while the ORM maps it to ``bytea``.  Writing a photo
into an ``oid`` column fails, so the patient writer asks
:func:`photo_column_writable` which insert variant to use, and
:func:`repair_photo_column` converts the column at startup.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from django.db import DatabaseError, connection

logger = logging.getLogger(__name__)

PHOTO_TABLE = 'patients'
PHOTO_COLUMN = 'photo'
BYTE_ARRAY_TYPES = {'bytea'}


def photo_column_type() -> Optional[str]:
    """Return the PostgreSQL data type of the photo column, or None elsewhere."""
    if connection.vendor != 'postgresql':
        return None
    with connection.cursor() as c:
        c.execute(
            "SELECT data_type FROM information_schema.columns "
            "WHERE table_name = %s AND column_name = %s",
            [PHOTO_TABLE, PHOTO_COLUMN],
        )
        row = c.fetchone()
    return row[0].lower() if row and row[0] else None


@lru_cache(maxsize=1)
def _cached_photo_column_type() -> Optional[str]:
    return photo_column_type()


def photo_column_writable() -> bool:
    """True unless the PostgreSQL photo column is not ``bytea``.

    A successful inspection is cached for the process; a failed one is
    not, so the next registration inspects again.
    """
    if connection.vendor != 'postgresql':
        return True
    try:
        column_type = _cached_photo_column_type()
    except DatabaseError as e:
        logger.warning('Could not inspect %s.%s: %s', PHOTO_TABLE, PHOTO_COLUMN, e)
        return False
    logger.debug('Photo column type: %s', column_type)
    return column_type in BYTE_ARRAY_TYPES


def clear_cache() -> None:
    _cached_photo_column_type.cache_clear()


def repair_photo_column() -> bool:
    """Convert an ``oid`` photo column to ``bytea``.  Returns True if altered."""
    if connection.vendor != 'postgresql':
        return False
    column_type = photo_column_type()
    logger.info('Current photo column type: %s', column_type)
    if column_type != 'oid':
        return False
    logger.info('Changing photo column type from OID to BYTEA...')
    with connection.cursor() as c:
        c.execute(
            f'ALTER TABLE {connection.ops.quote_name(PHOTO_TABLE)} '
            f'ALTER COLUMN {connection.ops.quote_name(PHOTO_COLUMN)} TYPE BYTEA USING NULL'
        )
    clear_cache()
    logger.info('Photo column type changed successfully')
    return True
