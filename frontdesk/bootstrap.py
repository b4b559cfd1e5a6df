"""
Startup routine for a deployment.

:class:`StartupConfig` is built once from settings (or explicitly, in
tests and management commands) and handed to :func:`initialize`, which
repairs the photo column and seeds sample data only when told to.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from django.db import DatabaseError

from .services import schema, seed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StartupConfig:
    seed_sample_data: bool = False
    repair_photo_column: bool = True

    @classmethod
    def from_settings(cls, source=None, **overrides) -> 'StartupConfig':
        if source is None:
            from django.conf import settings as source
        values = {
            'seed_sample_data': bool(getattr(source, 'SEED_SAMPLE_DATA', False)),
            'repair_photo_column': bool(getattr(source, 'REPAIR_PHOTO_COLUMN', True)),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class StartupReport:
    photo_column_repaired: bool = False
    sample_patient_id: Optional[str] = None
    errors: list = field(default_factory=list)


def initialize(config: StartupConfig) -> StartupReport:
    report = StartupReport()
    if config.repair_photo_column:
        logger.info('Checking database schema...')
        try:
            report.photo_column_repaired = schema.repair_photo_column()
        except DatabaseError as e:
            logger.error('Error checking/fixing schema: %s', e, exc_info=True)
            report.errors.append(f'schema: {e}')
    if config.seed_sample_data:
        report.sample_patient_id = seed.seed_sample_patient()
    else:
        logger.info('Skipping sample data; seeding is disabled')
    return report
