"""
Per-session form state.

A `FormController` owns one `FormData` and at most one `GeneratedRPM` and
walks the idle -> generating -> ready cycle. Controllers live in a
`FormStore`, keyed by the id stored in the session cookie.
"""
import logging
import time
from collections import OrderedDict
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from app.errors import (
    GENERATION_FAILED_MESSAGE,
    GenerationInProgress,
    InvalidFieldError,
    SubmissionBlocked,
)
from app.schemas.rpm_schema import (
    DEFAULT_GRADE,
    REQUIRED_TEXT_FIELDS,
    EducationLevel,
    FormData,
    FormView,
    GeneratedRPM,
    GraduateDimension,
    PedagogicalPractice,
    RPMVariant,
    resize_practices,
)

logger = logging.getLogger(__name__)

Generator = Callable[[FormData], Awaitable[GeneratedRPM]]


class GenerationStatus(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    READY = "ready"


def clamp_meeting_count(value: Any, max_meetings: Optional[int]) -> int:
    try:
        count = int(value)
    except (TypeError, ValueError):
        count = 1
    count = max(count, 1)
    if max_meetings:
        count = min(count, max_meetings)
    return count


class FormController:
    def __init__(
        self,
        generate: Generator,
        max_meetings: Optional[int] = 10,
        clear_result_on_submit: bool = True,
        variant: RPMVariant = RPMVariant.STANDAR,
        scroll_delay_ms: int = 100,
    ):
        self._generate = generate
        self.max_meetings = max_meetings
        self.clear_result_on_submit = clear_result_on_submit
        self.variant = variant
        self.scroll_delay_ms = scroll_delay_ms

        self.form = FormData()
        self.result: Optional[GeneratedRPM] = None
        # Snapshot of the form that produced `result`, used by the renderer
        self.result_form: Optional[FormData] = None
        self.status = GenerationStatus.IDLE
        self.last_error: Optional[str] = None
        self._scroll_pending = False

    # --- field events ---

    def update_fields(self, changes: Dict[str, Any]) -> None:
        for name, value in changes.items():
            if name == "jenjang":
                self.set_level(value)
            elif name == "jumlah_pertemuan":
                self.set_meeting_count(value)
            elif name in ("praktik_pedagogis", "dimensi") or name not in FormData.model_fields:
                raise InvalidFieldError(f"Field {name!r} cannot be set directly")
            else:
                setattr(self.form, name, value)

    def set_level(self, level) -> None:
        try:
            level = EducationLevel(level)
        except ValueError as e:
            raise InvalidFieldError(f"Unknown jenjang {level!r}") from e
        self.form.jenjang = level
        self.form.kelas = DEFAULT_GRADE[level]

    def set_meeting_count(self, value) -> None:
        count = clamp_meeting_count(value, self.max_meetings)
        self.form.jumlah_pertemuan = count
        self.form.praktik_pedagogis = resize_practices(self.form.praktik_pedagogis, count)

    def set_practice(self, index: int, practice) -> None:
        if not 0 <= index < self.form.jumlah_pertemuan:
            raise IndexError(f"Pertemuan {index + 1} tidak ada")
        self.form.praktik_pedagogis[index] = PedagogicalPractice(practice)

    def toggle_dimension(self, dimension) -> None:
        dimension = GraduateDimension(dimension)
        if dimension in self.form.dimensi:
            self.form.dimensi.remove(dimension)
        else:
            self.form.dimensi.append(dimension)

    # --- guard ---

    def missing_fields(self) -> List[str]:
        missing = [name for name in REQUIRED_TEXT_FIELDS if not getattr(self.form, name).strip()]
        if not self.form.dimensi:
            missing.append("dimensi")
        return missing

    @property
    def is_generating(self) -> bool:
        return self.status == GenerationStatus.GENERATING

    @property
    def can_submit(self) -> bool:
        return not self.is_generating and not self.missing_fields()

    # --- submit ---

    async def submit(self) -> GeneratedRPM:
        if self.is_generating:
            raise GenerationInProgress("A generation is already running")
        missing = self.missing_fields()
        if missing:
            raise SubmissionBlocked(missing)

        form = self.form.model_copy(deep=True)
        if self.clear_result_on_submit:
            self.result = None
            self.result_form = None
        self.status = GenerationStatus.GENERATING
        self.last_error = None

        try:
            result = await self._generate(form)
        except Exception as e:
            # The error state is transient: the alert travels with the exception
            self.last_error = getattr(e, "user_message", GENERATION_FAILED_MESSAGE)
            logger.warning(f"RPM generation failed: {e}")
            raise
        finally:
            # Also reached on cancellation, which is not an Exception
            if self.status == GenerationStatus.GENERATING:
                self.status = GenerationStatus.READY if self.result is not None else GenerationStatus.IDLE

        self.result = result
        self.result_form = form
        self.status = GenerationStatus.READY
        self._scroll_pending = True
        return result

    # --- view ---

    def consume_scroll(self) -> bool:
        pending, self._scroll_pending = self._scroll_pending, False
        return pending

    def view(self) -> FormView:
        scroll = self.consume_scroll()
        return FormView(
            status=self.status.value,
            variant=self.variant,
            form=self.form,
            result=self.result.model_dump(by_alias=True) if self.result is not None else None,
            can_submit=self.can_submit,
            missing_fields=self.missing_fields(),
            scroll_to_output=scroll,
            scroll_delay_ms=self.scroll_delay_ms if scroll else 0,
        )


class FormStore:
    """
    In-memory controllers, one per browser session. Nothing is persisted.

    Entries idle for longer than `ttl` seconds are dropped, matching the
    session cookie lifetime. When `maxsize` is reached the least recently
    used entry goes first.
    """

    def __init__(
        self,
        factory: Callable[[], FormController],
        ttl: float = 3600 * 24,
        maxsize: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._factory = factory
        self.ttl = ttl
        self.maxsize = maxsize
        self._clock = clock
        # form_id -> (controller, last access), oldest access first
        self._controllers: "OrderedDict[str, Tuple[FormController, float]]" = OrderedDict()

    def get(self, form_id: str) -> FormController:
        now = self._clock()
        self._expire(now)

        entry = self._controllers.pop(form_id, None)
        if entry is None:
            controller = self._factory()
            while self._controllers and len(self._controllers) >= self.maxsize:
                evicted, _ = self._controllers.popitem(last=False)
                logger.info(f"Form store full, dropping session {evicted}")
        else:
            controller = entry[0]
        self._controllers[form_id] = (controller, now)
        return controller

    def _expire(self, now: float) -> None:
        while self._controllers:
            form_id, (_, last_access) = next(iter(self._controllers.items()))
            if now - last_access < self.ttl:
                break
            del self._controllers[form_id]
            logger.debug(f"Form session {form_id} expired")

    def discard(self, form_id: str) -> None:
        self._controllers.pop(form_id, None)

    def __contains__(self, form_id: str) -> bool:
        return form_id in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)
