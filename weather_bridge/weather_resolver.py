from datetime import datetime
from typing import Any, Protocol

from .date_util import classify_date
from .schemas import DateDescriptor, DateRangeError, WeatherReply


class WeatherProvider(Protocol):
    def lookup(
        self,
        condition: str | None,
        city: str | None,
        state: str | None,
        date_descriptor: DateDescriptor,
    ) -> WeatherReply: ...


def resolve_weather(
    condition: str | None,
    city: Any,
    state: Any,
    date_token: str,
    provider: WeatherProvider,
    now: datetime | None = None,
) -> WeatherReply:
    date_descriptor = classify_date(date_token, now=now)
    if isinstance(date_descriptor, DateRangeError):
        return WeatherReply(tell=date_descriptor.error, state=state)

    reply = provider.lookup(condition, city, state, date_descriptor)
    if reply.state is None and not reply.ask:
        reply = reply.model_copy(update={"state": state})
    return reply


def compose_running_line(line: str, city: Any, state: Any) -> str:
    """'Temperature in ' becomes 'Temperature in Austin, Texas:'."""
    running_line = f"{line}{city if city is not None else ''}"
    if state:
        running_line += f", {state}"
    return running_line + ":"
