from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MessageRequest(BaseModel):
    input: dict[str, Any] | None = None
    context: dict[str, Any] = Field(default_factory=dict)

    @field_validator("input", mode="before")
    @classmethod
    def _input_object_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @field_validator("context", mode="before")
    @classmethod
    def _context_object_or_empty(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else {}


class ConversationOutput(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: list[str] | str = Field(default_factory=list)
    action: str | None = None


class ConversationReply(BaseModel):
    model_config = ConfigDict(extra="allow")

    output: ConversationOutput = Field(default_factory=ConversationOutput)
    context: dict[str, Any] = Field(default_factory=dict)


class SlotMatch(BaseModel):
    model_config = ConfigDict(extra="allow")

    value: Any = None


class ScalarSlot(BaseModel):
    value: Any = None


class HistorySlot(BaseModel):
    matches: list[SlotMatch] = Field(default_factory=list)


class DataGranularity(str, Enum):
    CURRENT_CONDITIONS = "conditions"
    SHORT_FORECAST = "forecast"
    EXTENDED_FORECAST = "forecast10day"


class DateDescriptor(BaseModel):
    is_today: bool
    data_granularity: DataGranularity
    display_phrase: str
    day: int | None = None
    month: int | None = None
    year: int | None = None
    weekday: str | None = None
    period: int | None = None

    @property
    def lead_in(self) -> str:
        if self.data_granularity == DataGranularity.CURRENT_CONDITIONS:
            return self.display_phrase
        return f"{self.display_phrase} is forecast to be "


class DateRangeError(BaseModel):
    error: str


class WeatherReply(BaseModel):
    ask: str | None = None
    options: list[str] = Field(default_factory=list)
    tell: str | list[str] | None = None
    state: Any = None

    @property
    def text(self) -> str | list[str]:
        if self.ask:
            return self.ask
        return self.tell if self.tell is not None else ""
