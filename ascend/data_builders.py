"""Habit and log builders.

This module is the SINGLE SOURCE OF TRUTH for turning flat storage rows into
the engine's typed models, and back.

### Build Functions
- `build_habit()` validates a flat habit row (voluptuous schema + cross-field
  rules) and folds its optional fields into the Schedule / Completion tagged
  unions of type_defs.
- `build_log()` validates a flat log row into a HabitLog.
- `log_to_record()` flattens a HabitLog for the storage upsert call.

### Validation Functions
- `validate_habit_data()` runs the same rules but returns a dict of
  {field: reason} instead of raising, for form-style callers.

Cycle fields never cause a validation error: a cycle habit with a missing
start date, cycle length or pattern is built as-is and simply degrades in the
recurrence engine.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol

from . import const
from .schemas import HABIT_RECORD_SCHEMA, LOG_RECORD_SCHEMA
from .type_defs import (
    BooleanCompletion,
    Completion,
    CycleSchedule,
    DailySchedule,
    GoalCompletion,
    Habit,
    HabitLog,
    Schedule,
    WeeklySchedule,
)

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class HabitValidationError(ValueError):
    """Validation error with field-specific information.

    Raised when a habit row cannot be turned into a Habit. The field attribute
    lets a form layer highlight the offending input.

    Attributes:
        field: The DATA_HABIT_* key that failed validation
        reason: Human-readable description of the failure

    Example:
        raise HabitValidationError(
            field=const.DATA_HABIT_DAYS_OF_WEEK,
            reason="weekly habits need at least one weekday",
        )
    """

    def __init__(self, field: str, reason: str) -> None:
        """Initialize HabitValidationError.

        Args:
            field: The DATA_HABIT_* key for the field that failed validation
            reason: Description of the failure
        """
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid habit field '{field}': {reason}")


class LogValidationError(ValueError):
    """Raised when a log row cannot be turned into a HabitLog."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid log field '{field}': {reason}")


def _first_error(err: vol.Invalid) -> tuple[str, str]:
    """Return (field, reason) of the first voluptuous error."""
    if isinstance(err, vol.MultipleInvalid):
        err = err.errors[0]
    field = str(err.path[0]) if err.path else "record"
    return field, err.msg


# ==============================================================================
# HABITS
# ==============================================================================


def _build_schedule(data: dict[str, Any]) -> Schedule:
    """Fold frequency-specific fields of a validated row into a Schedule."""
    frequency = data[const.DATA_HABIT_FREQUENCY]

    if frequency == const.FREQUENCY_WEEKLY:
        days = data.get(const.DATA_HABIT_DAYS_OF_WEEK) or []
        if not days:
            raise HabitValidationError(
                field=const.DATA_HABIT_DAYS_OF_WEEK,
                reason="weekly habits need at least one weekday",
            )
        return WeeklySchedule(days_of_week=frozenset(days))

    if frequency == const.FREQUENCY_CYCLE:
        cycle_type = data.get(const.DATA_HABIT_CYCLE_TYPE) or const.DEFAULT_CYCLE_TYPE
        if cycle_type not in const.CYCLE_TYPE_OPTIONS:
            const.LOGGER.warning(
                "Habit '%s' has unknown cycle type '%s'; it will never apply",
                data[const.DATA_HABIT_NAME],
                cycle_type,
            )
        if data.get(const.DATA_HABIT_CYCLE_START) is None:
            const.LOGGER.debug(
                "Habit '%s' is a cycle habit without a start date",
                data[const.DATA_HABIT_NAME],
            )
        return CycleSchedule(
            start=data.get(const.DATA_HABIT_CYCLE_START),
            cycle_type=cycle_type,
            cycle_days=data.get(const.DATA_HABIT_CYCLE_DAYS),
            cycle_pattern=data.get(const.DATA_HABIT_CYCLE_PATTERN),
        )

    return DailySchedule()


def _build_completion(data: dict[str, Any]) -> Completion:
    """Pick the completion mode of a validated row."""
    goal_value = data.get(const.DATA_HABIT_GOAL_VALUE)
    if goal_value is None:
        return BooleanCompletion()
    return GoalCompletion(
        goal_value=goal_value,
        goal_unit=data.get(const.DATA_HABIT_GOAL_UNIT),
    )


def build_habit(record: dict[str, Any]) -> Habit:
    """Build a Habit from a flat storage row.

    Args:
        record: Row with DATA_HABIT_* keys (extra keys are ignored)

    Returns:
        Immutable Habit with its schedule and completion variants

    Raises:
        HabitValidationError: If a required field is missing or malformed,
            or a weekly habit has no weekdays

    Examples:
        build_habit({"id": "h1", "name": "Read", "weight": 3})
        build_habit({"id": "h2", "name": "Gym", "frequency": "weekly",
                     "days_of_week": [1, 3, 5]})
    """
    try:
        data = HABIT_RECORD_SCHEMA(record)
    except vol.Invalid as err:
        field, reason = _first_error(err)
        raise HabitValidationError(field=field, reason=reason) from err

    return Habit(
        habit_id=data[const.DATA_HABIT_ID],
        name=data[const.DATA_HABIT_NAME],
        weight=data[const.DATA_HABIT_WEIGHT],
        schedule=_build_schedule(data),
        completion=_build_completion(data),
        ideal_time=data.get(const.DATA_HABIT_IDEAL_TIME) or None,
        strict_mode=data[const.DATA_HABIT_STRICT_MODE],
        is_active=data[const.DATA_HABIT_IS_ACTIVE],
        is_paused=data[const.DATA_HABIT_IS_PAUSED],
    )


def build_habits(records: list[dict[str, Any]]) -> list[Habit]:
    """Build every row of a habit collection, preserving order."""
    return [build_habit(record) for record in records]


def validate_habit_data(record: dict[str, Any]) -> dict[str, str]:
    """Validate a habit row without raising.

    Args:
        record: Row with DATA_HABIT_* keys

    Returns:
        Dict of errors: {field: reason}. Empty dict means validation passed.
    """
    try:
        build_habit(record)
    except HabitValidationError as err:
        return {err.field: err.reason}
    return {}


# ==============================================================================
# LOGS
# ==============================================================================


def build_log(record: dict[str, Any]) -> HabitLog:
    """Build a HabitLog from a flat storage row.

    Raises:
        LogValidationError: If the habit reference or date is missing or
            a field is malformed
    """
    try:
        data = LOG_RECORD_SCHEMA(record)
    except vol.Invalid as err:
        field, reason = _first_error(err)
        raise LogValidationError(field=field, reason=reason) from err

    return HabitLog(
        habit_id=data[const.DATA_LOG_HABIT_ID],
        date=data[const.DATA_LOG_DATE],
        completed=data[const.DATA_LOG_COMPLETED],
        completed_at=data[const.DATA_LOG_COMPLETED_AT],
        score_earned=data[const.DATA_LOG_SCORE_EARNED] or 0,
        penalty_applied=data[const.DATA_LOG_PENALTY_APPLIED],
        value_logged=data[const.DATA_LOG_VALUE_LOGGED],
    )


def build_logs(records: list[dict[str, Any]]) -> list[HabitLog]:
    """Build every row of a log collection, preserving order."""
    return [build_log(record) for record in records]


def log_to_record(log: HabitLog) -> dict[str, Any]:
    """Flatten a HabitLog into a storage row for upsert-by-(habit_id, date)."""
    return {
        const.DATA_LOG_HABIT_ID: log.habit_id,
        const.DATA_LOG_DATE: log.date,
        const.DATA_LOG_COMPLETED: log.completed,
        const.DATA_LOG_COMPLETED_AT: (
            log.completed_at.isoformat() if log.completed_at else None
        ),
        const.DATA_LOG_SCORE_EARNED: log.score_earned,
        const.DATA_LOG_PENALTY_APPLIED: log.penalty_applied,
        const.DATA_LOG_VALUE_LOGGED: log.value_logged,
    }
