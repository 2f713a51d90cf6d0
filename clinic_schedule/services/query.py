"""
Ciclo fetch -> recompute del calendario, con token de request.

Cada cambio de parámetros (doctor, fecha, vista) llama a ``refresh`` con un
``ScheduleQuery`` nuevo. Sólo se commitea la respuesta cuyo token sigue siendo
el último emitido; una respuesta vieja que llega tarde se descarta.

    idle -> loading -> success | error
"""
import asyncio
import enum
import itertools
from dataclasses import dataclass, field
from typing import List, Optional

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from clinic_schedule.core.errors import FetchFailure, NotFound, ScheduleError
from clinic_schedule.core.logging_config import get_logger
from clinic_schedule.schemas.appointment import AppointmentOut, PopulatedAppointment
from clinic_schedule.schemas.doctor import DoctorOut
from clinic_schedule.schemas.schedule import CalendarView, ScheduleQuery, ViewState
from clinic_schedule.services.appointment_service import AppointmentService

logger = get_logger(__name__)


class QueryStatus(str, enum.Enum):
    idle = "idle"
    loading = "loading"
    success = "success"
    error = "error"


class StaleResponse(Exception):
    """El token de la respuesta ya no es el último; se descarta."""


@dataclass(frozen=True)
class QueryResult:
    token: int
    status: QueryStatus
    query: Optional[ScheduleQuery] = None
    appointments: List[AppointmentOut] = field(default_factory=list)
    populated: List[PopulatedAppointment] = field(default_factory=list)
    doctor: Optional[DoctorOut] = None
    error: Optional[ScheduleError] = None

    @property
    def loading(self) -> bool:
        return self.status == QueryStatus.loading

    @property
    def view_state(self) -> ViewState:
        """Estados vacíos/errores distintos para la presentación."""
        if self.status == QueryStatus.idle:
            return ViewState.idle
        if self.query is not None and not self.query.has_doctor:
            return ViewState.no_doctor
        if self.status == QueryStatus.loading:
            return ViewState.loading
        if self.status == QueryStatus.error:
            if isinstance(self.error, NotFound):
                return ViewState.no_doctor
            return ViewState.error
        if not self.appointments:
            return ViewState.empty
        return ViewState.ready


class AppointmentsQuery:
    def __init__(
        self,
        service: AppointmentService,
        timeout: Optional[float] = 10.0,
        retries: int = 0,
    ):
        self.service = service
        self.timeout = timeout
        self.retries = retries
        self._tokens = itertools.count(1)
        self._latest = 0
        self.state = QueryResult(token=0, status=QueryStatus.idle)

    @property
    def latest_token(self) -> int:
        return self._latest

    def _is_current(self, token: int) -> bool:
        return token == self._latest

    async def _fetch(self, query: ScheduleQuery):
        doctor = await self.service.get_doctor_by_id(query.doctor_id)
        if query.view == CalendarView.week:
            appts = await self.service.get_appointments_by_doctor_and_date_range(
                query.doctor_id, query.range_start, query.range_end
            )
        else:
            appts = await self.service.get_appointments_by_doctor_and_date(
                query.doctor_id, query.day
            )
        populated = await self.service.get_populated_appointments(appts)
        return doctor, appts, populated

    async def _fetch_with_timeout(self, query: ScheduleQuery, token: int):
        # reintentos acotados con backoff; ninguno pisa un request más nuevo
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self.retries + 1),
            wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
            retry=retry_if_exception_type(FetchFailure),
            reraise=True,
        ):
            with attempt:
                if not self._is_current(token):
                    raise StaleResponse()
                try:
                    return await asyncio.wait_for(self._fetch(query), self.timeout)
                except asyncio.TimeoutError as exc:
                    raise FetchFailure("Timeout consultando turnos") from exc

    async def refresh(self, query: ScheduleQuery) -> QueryResult:
        """Dispara un ciclo para ``query`` y devuelve el estado vigente al terminar."""
        token = next(self._tokens)
        self._latest = token
        log = logger.bind(token=token, doctor_id=query.doctor_id,
                          day=query.day.isoformat(), view=query.view.value)

        if not query.has_doctor:
            self.state = QueryResult(token=token, status=QueryStatus.success, query=query)
            return self.state

        self.state = QueryResult(token=token, status=QueryStatus.loading, query=query)
        log.info("fetch_started")
        try:
            doctor, appts, populated = await self._fetch_with_timeout(query, token)
        except StaleResponse:
            log.info("stale_response_dropped")
            return self.state
        except ScheduleError as exc:
            if not self._is_current(token):
                log.info("stale_response_dropped", error=exc.message)
                return self.state
            log.warning("fetch_failed", error=exc.message, kind=type(exc).__name__)
            self.state = QueryResult(token=token, status=QueryStatus.error, query=query, error=exc)
            return self.state

        if not self._is_current(token):
            log.info("stale_response_dropped")
            return self.state

        self.state = QueryResult(
            token=token,
            status=QueryStatus.success,
            query=query,
            appointments=appts,
            populated=populated,
            doctor=doctor,
        )
        log.info("fetch_committed", count=len(appts))
        return self.state
