"""
Nurse accounts and credential checks.

Credentials are compared as stored plain text.  A successful login only
returns the nurse summary; no token or session is created.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from django.utils import timezone
from rest_framework.exceptions import NotFound

from ..exceptions import BadRequest, Conflict
from ..models import Nurse
from ..serializers.fields import NURSE_KEYS, clean_text, normalize, validate_with
from ..serializers.nurse import NurseInputSerializer

logger = logging.getLogger(__name__)

ACTIVE = 'Active'
PROFILE_FIELDS = ('name', 'email', 'role', 'status')


@dataclass
class LoginResult:
    success: bool
    message: str
    error: Optional[str] = None
    nurse: Optional[Nurse] = None


def get_nurse(nurse_id: str) -> Nurse:
    nurse = Nurse.objects.by_nurse_id(nurse_id)
    if nurse is None:
        raise NotFound('Nurse not found')
    return nurse


def _read_fields(data: Mapping[str, Any]) -> dict:
    if not isinstance(data, Mapping):
        raise BadRequest('Nurse data must be an object')
    fields = normalize(data, NURSE_KEYS)
    for name in ('nurse_id',) + PROFILE_FIELDS:
        fields[name] = clean_text(fields[name])
    if fields['email'] == '':
        fields['email'] = None
    if fields['password'] is not None and not isinstance(fields['password'], str):
        fields['password'] = str(fields['password'])
    return validate_with(NurseInputSerializer, fields)


def create_nurse(data: Mapping[str, Any]) -> Nurse:
    fields = _read_fields(data)
    if not fields['nurse_id']:
        raise BadRequest('Nurse ID is required')
    if not fields['password']:
        raise BadRequest('Password is required')
    if Nurse.objects.nurse_id_exists(fields['nurse_id']):
        logger.warning('Nurse ID already exists: %s', fields['nurse_id'])
        raise Conflict(f"Nurse with ID {fields['nurse_id']} already exists")
    if fields['email'] and Nurse.objects.email_exists(fields['email']):
        logger.warning('Nurse email already exists: %s', fields['email'])
        raise Conflict('Nurse with this email already exists')
    nurse = Nurse.objects.create(created_at=timezone.now(), **fields)
    logger.info('Created nurse %s', nurse.nurse_id)
    return nurse


def update_nurse(nurse_id: str, data: Mapping[str, Any]) -> Nurse:
    """Replace the profile fields of ``nurse_id``.

    The id in the path wins over any id in the body.  The credential is
    only replaced when a new one is supplied.
    """
    nurse = get_nurse(nurse_id)
    fields = _read_fields(data)
    if fields['email'] and Nurse.objects.email_exists(fields['email'], exclude_nurse_id=nurse_id):
        raise Conflict('Nurse with this email already exists')
    for name in PROFILE_FIELDS:
        setattr(nurse, name, fields[name])
    update_fields = list(PROFILE_FIELDS)
    if fields['password']:
        nurse.password = fields['password']
        update_fields.append('password')
    nurse.save(update_fields=update_fields)
    logger.info('Updated nurse %s', nurse_id)
    return nurse


def delete_nurse(nurse_id: str) -> None:
    get_nurse(nurse_id).delete()
    logger.info('Deleted nurse %s', nurse_id)


def update_status(nurse_id: str, status: str) -> bool:
    status = validate_with(NurseInputSerializer, {'status': clean_text(status)})['status']
    updated = Nurse.objects.filter(nurse_id=nurse_id).update(status=status)
    if updated:
        logger.info('Nurse %s status set to %s', nurse_id, status)
    return bool(updated)


def active_nurses():
    return Nurse.objects.with_status(ACTIVE)


def authenticate(nurse_id: str, password: str) -> LoginResult:
    nurse = Nurse.objects.by_nurse_id(nurse_id)
    if nurse is None:
        logger.warning('Login attempt for unknown nurse ID %s', nurse_id)
        return LoginResult(success=False, error='invalid_nurse_id', message='Nurse ID not found')
    if nurse.password != password:
        logger.warning('Incorrect password for nurse %s', nurse_id)
        return LoginResult(success=False, error='invalid_password', message='Incorrect password')
    logger.info('Nurse %s logged in', nurse_id)
    return LoginResult(success=True, message='Login successful', nurse=nurse)
