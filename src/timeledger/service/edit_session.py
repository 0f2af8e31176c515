# SPDX-License-Identifier: MIT

import logging
import math
from typing import Literal, Optional, Sequence, TypeAlias

import pendulum

from timeledger.errors import (
    IncompleteInputError,
    InvalidRangeError,
    InvalidTimeFormatError,
    MissingRequiredFieldError,
)
from timeledger.model.parsed_time import Incomplete, ParsedTime
from timeledger.model.pending_edit import DurationMode, PendingEdit
from timeledger.model.time_entry import ReconciledTimes, TimeEntry, TimeEntryDelta
from timeledger.service.duration import (
    SECONDS_PER_HOUR,
    duration_hours_between,
    end_display_from_duration,
    format_duration_hours,
    reconcile,
    reconcile_from_end,
    start_display_from_duration,
)
from timeledger.service.input_validation import ValidationErrors
from timeledger.service.time_parse import (
    format_12_hour,
    mask_time_input,
    parse_time_text,
)

logger = logging.getLogger(__name__)

SessionKind: TypeAlias = Literal["new", "edit"]

DEFAULT_REQUIRED_FIELDS = ("project_id", "area_of_focus_id", "cost_code")

REFERENCE_FIELD_NAMES = ("user_id", "project_id", "area_of_focus_id", "cost_code")


class EditSession:
    """
    One add-row or edit-row session.

    Holds the raw text typed into the start, end and duration fields and
    keeps them consistent as they change: the field being typed into and
    the one typed before it are authoritative, the third is filled in.
    Nothing leaves the session until commit; cancel throws it all away.
    """

    def __init__(
        self,
        date: pendulum.Date,
        kind: SessionKind = "new",
        duration_mode: DurationMode = "start",
        errors: Optional[ValidationErrors] = None,
        tz: str = "local",
    ) -> None:
        self.date = date
        self.kind = kind
        self.tz = tz
        self.errors = errors if errors is not None else ValidationErrors()
        self.pending: PendingEdit = {
            "start_time": "",
            "end_time": "",
            "duration": "",
            "duration_mode": duration_mode,
        }
        self.note: Optional[str] = None
        self.references: dict[str, Optional[str]] = {
            field: None for field in REFERENCE_FIELD_NAMES
        }
        # Which of end time and duration the user set last.
        self._authoritative = "end_time"
        # The field last filled in from the other two, if any.
        self._derived: Optional[str] = None
        # Stored times of the entry being edited, with the text shown for them.
        self._loaded: Optional[
            tuple[pendulum.Date, tuple[str, str, str], ReconciledTimes]
        ] = None

    @classmethod
    def for_entry(
        cls,
        entry: TimeEntry,
        errors: Optional[ValidationErrors] = None,
        tz: str = "local",
    ) -> "EditSession":
        session = cls(entry["date"], kind="edit", errors=errors, tz=tz)
        start_time = entry["start_time"].in_tz(tz)
        session.pending["start_time"] = format_12_hour(
            start_time.hour, start_time.minute
        )
        if entry["end_time"] is not None:
            end_time = entry["end_time"].in_tz(tz)
            session.pending["end_time"] = format_12_hour(
                end_time.hour, end_time.minute
            )
        if entry["duration_seconds"] is not None:
            session.pending["duration"] = format_duration_hours(
                entry["duration_seconds"] / SECONDS_PER_HOUR
            )
        if entry["end_time"] is not None and entry["duration_seconds"] is not None:
            session._loaded = (
                entry["date"],
                session.__time_texts(),
                {
                    "start_time": entry["start_time"],
                    "end_time": entry["end_time"],
                    "duration_seconds": entry["duration_seconds"],
                },
            )
        session.note = entry["note"]
        for field in REFERENCE_FIELD_NAMES:
            session.references[field] = entry[field]  # type: ignore[literal-required]
        return session

    @property
    def start_field(self) -> str:
        return f"{self.kind}_start_time"

    @property
    def end_field(self) -> str:
        return f"{self.kind}_end_time"

    def set_duration_mode(self, duration_mode: DurationMode) -> None:
        self.pending["duration_mode"] = duration_mode

    def set_start_text(self, raw: str) -> str:
        text = mask_time_input(raw)
        self.pending["start_time"] = text
        self.errors.validate(self.start_field, text)

        start = self.__try_parse_start()
        hours = self.__try_duration_hours()
        if start is None:
            return text
        if (
            self.pending["duration_mode"] == "start"
            and self._authoritative == "duration"
            and hours is not None
        ):
            self.__fill_end(start, hours)
        else:
            end = self.__try_parse_end(start)
            if end is not None:
                self.__fill_duration(start, end)
        return text

    def set_end_text(self, raw: str) -> str:
        text = mask_time_input(raw)
        self.pending["end_time"] = text
        self.errors.validate(self.end_field, text)

        start = self.__try_parse_start()
        end = self.__try_parse_end(start)
        hours = self.__try_duration_hours()
        if end is None:
            return text
        if self.pending["duration_mode"] == "end" and hours is not None:
            self.__fill_start(end, hours)
        else:
            self._authoritative = "end_time"
            if start is not None:
                self.__fill_duration(start, end)
        return text

    def set_duration_text(self, raw: str) -> str:
        text = raw.strip()
        self.pending["duration"] = text
        self._authoritative = "duration"

        hours = self.__try_duration_hours()
        if hours is None:
            return text
        if self.pending["duration_mode"] == "start":
            start = self.__try_parse_start()
            if start is not None:
                self.__fill_end(start, hours)
        else:
            end = self.__try_parse_end(self.__try_parse_start())
            if end is not None:
                self.__fill_start(end, hours)
        return text

    def commit(
        self, required: Sequence[str] = DEFAULT_REQUIRED_FIELDS
    ) -> TimeEntryDelta:
        """
        Reconcile the pending text into the fields to persist.

        Raises:
            MissingRequiredFieldError: start, one of end/duration, or a
                required reference field is missing
            InvalidTimeFormatError: a time field does not hold a valid time
            InvalidRangeError: the end cannot be placed after the start
        """
        missing: list[str] = []
        if self.pending["start_time"] == "":
            missing.append("start_time")
        if self.pending["end_time"] == "" and self.pending["duration"] == "":
            missing.append("end_time")
        for field in required:
            if not self.references.get(field):
                missing.append(field)
        if len(missing) > 0:
            raise MissingRequiredFieldError(missing)

        for field in (self.start_field, self.end_field):
            if self.errors.get(field):
                raise InvalidTimeFormatError(self.errors.get(field))

        times: ReconciledTimes
        loaded = self._loaded
        if loaded is not None and self.__times_unchanged():
            # Stored times are finer than their text; keep them as they were.
            times = loaded[2]
        else:
            times = self.__reconcile_pending()
        logger.debug(
            "committed %s entry: %s for %ds",
            self.kind,
            times["start_time"],
            times["duration_seconds"],
        )

        delta: TimeEntryDelta = {
            "date": self.date,
            "start_time": times["start_time"],
            "end_time": times["end_time"],
            "duration_seconds": times["duration_seconds"],
            "note": self.note,
        }
        for field in REFERENCE_FIELD_NAMES:
            delta[field] = self.references[field]  # type: ignore[literal-required]
        self.discard()
        return delta

    def cancel(self) -> None:
        self.discard()

    def discard(self) -> None:
        self.pending["start_time"] = ""
        self.pending["end_time"] = ""
        self.pending["duration"] = ""
        self._authoritative = "end_time"
        self._derived = None
        self._loaded = None
        self.errors.clear([self.start_field, self.end_field])

    def __time_texts(self) -> tuple[str, str, str]:
        return (
            self.pending["start_time"],
            self.pending["end_time"],
            self.pending["duration"],
        )

    def __times_unchanged(self) -> bool:
        if self._loaded is None:
            return False
        date, texts, _ = self._loaded
        return self.date == date and self.__time_texts() == texts

    def __reconcile_pending(self) -> ReconciledTimes:
        start = self.__parse_final("start_time", None)
        end = (
            self.__parse_final("end_time", start)
            if self.pending["end_time"] != ""
            else None
        )
        hours = self.__duration_hours_final()

        derived = self.__derived_field(end, hours)
        if derived == "start_time":
            return reconcile_from_end(self.date, end, hours, self.tz)
        if derived == "end_time":
            return reconcile(self.date, start, None, hours, self.tz)
        return reconcile(self.date, start, end, None, self.tz)

    def __derived_field(
        self, end: Optional[ParsedTime], hours: Optional[float]
    ) -> str:
        """Which of start, end and duration commit recomputes from the other two."""
        if end is None:
            return "end_time"
        if hours is None:
            return "duration"
        if self._derived is not None:
            return self._derived
        if self.pending["duration_mode"] == "end":
            return "start_time"
        return "end_time" if self._authoritative == "duration" else "duration"

    def __fill_end(self, start: ParsedTime, hours: float) -> None:
        self.pending["end_time"] = end_display_from_duration(start, hours)
        self._derived = "end_time"
        self.errors.clear([self.end_field])

    def __fill_start(self, end: ParsedTime, hours: float) -> None:
        self.pending["start_time"] = start_display_from_duration(end, hours)
        self._derived = "start_time"
        self.errors.clear([self.start_field])

    def __fill_duration(self, start: ParsedTime, end: ParsedTime) -> None:
        self.pending["duration"] = format_duration_hours(
            duration_hours_between(start, end)
        )
        self._derived = "duration"
        self._authoritative = "end_time"

    def __try_parse_start(self) -> Optional[ParsedTime]:
        return self.__try_parse(self.pending["start_time"], None)

    def __try_parse_end(self, start: Optional[ParsedTime]) -> Optional[ParsedTime]:
        return self.__try_parse(self.pending["end_time"], start)

    def __try_parse(
        self, text: str, anchor: Optional[ParsedTime]
    ) -> Optional[ParsedTime]:
        # Mid-typing failures are already reported by the validator.
        try:
            parsed = parse_time_text(text, anchor)
        except InvalidTimeFormatError:
            return None
        if isinstance(parsed, Incomplete):
            return None
        return parsed

    def __try_duration_hours(self) -> Optional[float]:
        try:
            hours = float(self.pending["duration"])
        except ValueError:
            return None
        if not math.isfinite(hours) or hours <= 0:
            return None
        return hours

    def __parse_final(self, field: str, anchor: Optional[ParsedTime]) -> ParsedTime:
        text = self.pending[field]  # type: ignore[literal-required]
        parsed = parse_time_text(text, anchor, final=True)
        if isinstance(parsed, Incomplete):
            raise IncompleteInputError(field, text)
        return parsed

    def __duration_hours_final(self) -> Optional[float]:
        text = self.pending["duration"]
        if text == "":
            return None
        try:
            hours = float(text)
        except ValueError:
            hours = math.nan
        if not math.isfinite(hours):
            raise InvalidRangeError(
                f"Duration must be a number of hours, got '{text}'"
            )
        return hours
