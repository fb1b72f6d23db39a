"""
Serialization helpers shared by the models

Records are stored with snake_case columns and exchanged as the camelCase
JSON documents the dashboards consume.
"""

import uuid
from datetime import datetime


def new_id(prefix):
    """Build a record id such as ``report-1718000000000-3f2a9c1d``."""
    millis = int(datetime.utcnow().timestamp() * 1000)
    return f'{prefix}-{millis}-{uuid.uuid4().hex[:8]}'


def isoformat(value):
    return value.isoformat() if value is not None else None


class SerializerMixin:
    """Maps between API field names and model columns.

    ``API_FIELDS`` maps a flat JSON key to a column; ``NESTED_FIELDS`` maps a
    JSON object key to a ``{sub_key: column}`` mapping.
    """
    API_FIELDS = {}
    NESTED_FIELDS = {}
    READ_ONLY_FIELDS = ('id',)

    @classmethod
    def columns_from_payload(cls, payload):
        """Translate a camelCase payload into column keyword arguments.

        Unknown and read-only keys are ignored.
        """
        columns = {}
        for key, value in (payload or {}).items():
            if key in cls.READ_ONLY_FIELDS:
                continue
            if key in cls.API_FIELDS:
                columns[cls.API_FIELDS[key]] = value
            elif key in cls.NESTED_FIELDS and isinstance(value, dict):
                for sub_key, sub_value in value.items():
                    column = cls.NESTED_FIELDS[key].get(sub_key)
                    if column:
                        columns[column] = sub_value
        return columns
