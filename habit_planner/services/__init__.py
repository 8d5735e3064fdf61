"""Service-layer exports."""

from .codec_service import (
    DecodeError,
    decode_collection,
    decode_habit,
    decode_recurrence,
    decode_routine,
    encode_collection,
    encode_habit,
    encode_routine,
    parse_date,
)
from .legacy_migration_service import (
    upgrade_collection_payload,
    upgrade_habit_payload,
    upgrade_routine_payload,
)
from .store_service import PlannerStore
from .timeline_service import build_day_summary, build_month_calendar

__all__ = [
    "DecodeError",
    "parse_date",
    "decode_recurrence",
    "encode_habit",
    "decode_habit",
    "encode_routine",
    "decode_routine",
    "encode_collection",
    "decode_collection",
    "upgrade_habit_payload",
    "upgrade_routine_payload",
    "upgrade_collection_payload",
    "PlannerStore",
    "build_day_summary",
    "build_month_calendar",
]
