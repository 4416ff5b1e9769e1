# app/schemas/__init__.py
from .appointment import (
    AppointmentCreate,
    AppointmentUpdate,
    AppointmentResponse,
    PagedAppointmentsResponse,
    NextAppointmentResponse
)

from .provider_schedule import (
    ScheduleItem,
    BulkScheduleUpdate,
    ProviderScheduleResponse
)

from .calendar import (
    CalendarDaySummary,
    AppointmentDetail,
    DayDetail
)
