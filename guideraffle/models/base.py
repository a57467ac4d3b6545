"""Declarative base shared by the raffle's persisted records."""

from datetime import datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase

from guideraffle.db.metadata import metadata_obj


class Base(DeclarativeBase):
    metadata = metadata_obj

    # Winner timestamps are always stored timezone-aware (UTC).
    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }
