"""
Field-name normalization for loosely structured request bodies.

Front-end clients send the same logical field under several spellings
(``fatherName`` / ``father_name``, ``phoneNumber`` / ``phone_number`` /
``phone`` ...).  Each entity declares one ordered table of candidate keys
per model field; :func:`normalize` resolves every field to the first
candidate whose value is not ``None``.
"""
from __future__ import annotations

import base64
import binascii
from typing import Any, Iterable, Mapping, Optional

import bleach
from django.utils import timezone
from django.utils.dateparse import parse_datetime
from rest_framework import serializers

from ..exceptions import BadRequest

KeyTable = Mapping[str, tuple]

PATIENT_KEYS: KeyTable = {
    'patient_id': ('patientId', 'patient_id'),
    'name': ('name',),
    'surname': ('surname',),
    'father_name': ('fatherName', 'father_name'),
    'gender': ('gender',),
    'age': ('age',),
    'address': ('address',),
    'blood_group': ('bloodGroup', 'blood_group'),
    'phone_number': ('phoneNumber', 'phone_number', 'phone'),
    'aadhar_number': ('aadharNumber', 'aadhar_number'),
    'photo': ('photo',),
}

VISIT_KEYS: KeyTable = {
    'patient_id': ('patientId', 'patient_id'),
    'visit_date': ('visitDate', 'visit_date'),
    'bp': ('bp',),
    'complaint': ('complaint',),
    'symptoms': ('symptoms', 'current_condition', 'currentCondition'),
    'op_no': ('opNo', 'op_no'),
    'reg_no': ('regNo', 'reg_no'),
    'status': ('status',),
    'temperature': ('temperature',),
    'weight': ('weight',),
    'prescription': ('prescription',),
}

LABTEST_KEYS: KeyTable = {
    'test_name': ('testName', 'test_name'),
    'result': ('result',),
    'reference_range': ('referenceRange', 'reference_range'),
    'status': ('status',),
    'test_given_at': ('testGivenAt', 'test_given_at'),
}

NURSE_KEYS: KeyTable = {
    'nurse_id': ('nurse_id', 'nurseId'),
    'name': ('name',),
    'email': ('email',),
    'password': ('password',),
    'role': ('role',),
    'status': ('status',),
}


def first_present(data: Mapping[str, Any], keys: Iterable[str]) -> Any:
    """Return the value of the first key in ``keys`` that is present and not None."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def normalize(data: Mapping[str, Any], table: KeyTable) -> dict:
    return {field: first_present(data, keys) for field, keys in table.items()}


def clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    return bleach.clean(value.strip(), strip=True)


def coerce_age(value: Any) -> int:
    """Accept an int or a numeric string; anything else counts as 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def decode_photo(value: Any) -> Optional[bytes]:
    if value in (None, ''):
        return None
    if not isinstance(value, str):
        raise BadRequest('Photo must be a base64 encoded string')
    if value.startswith('data:') and ',' in value:
        value = value.split(',', 1)[1]
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        raise BadRequest('Photo must be a base64 encoded string')


def encode_photo(value) -> Optional[str]:
    if not value:
        return None
    return base64.b64encode(bytes(value)).decode('ascii')


def parse_timestamp(value: Any, field: str):
    """Parse an ISO-8601 timestamp; naive values are read in the current time zone."""
    if value in (None, ''):
        return None
    try:
        parsed = parse_datetime(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise BadRequest(f'Invalid {field}: {value}')
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def isoformat(value) -> Optional[str]:
    return value.isoformat() if value else None


def optional_text(**kwargs) -> serializers.CharField:
    """Text input that may be absent, null or blank; lengths follow the column."""
    return serializers.CharField(required=False, allow_null=True, allow_blank=True, **kwargs)


def validate_with(serializer_class, fields: dict) -> dict:
    """Check normalized ``fields`` against ``serializer_class``.

    Raises a 400 with per-field details on failure.  Declared fields are
    replaced by their validated values; undeclared ones (photo bytes,
    parsed timestamps) pass through untouched.
    """
    s = serializer_class(data=fields)
    s.is_valid(raise_exception=True)
    return {**fields, **s.validated_data}
