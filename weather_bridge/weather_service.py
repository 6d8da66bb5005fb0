import logging
from collections import Counter
from datetime import date, datetime, timezone
from typing import Any

import requests

from .config import (
    OPENWEATHER_API_URL,
    OPENWEATHER_DAILY_URL,
    OPENWEATHER_FORECAST_URL,
    OPENWEATHER_GEOCODING_URL,
    REQUEST_TIMEOUT_SECONDS,
    WEATHER_UNITS,
)
from .date_util import format_time, format_time_am_pm
from .schemas import DataGranularity, DateDescriptor, WeatherReply

LOGGER = logging.getLogger("weather_bridge.weather")
LOGGER.addHandler(logging.NullHandler())

WEATHER_LIVE_DATA_UNAVAILABLE = "Live weather data is temporarily unavailable."
NO_DATA_FOR_DAY = "I'm sorry, I don't have {label} data for that day."

GEOCODING_LIMIT = 5
# Today plus the nine days ahead that dates can reach.
DAILY_FORECAST_DAYS = 10

TEMPERATURE_MARKERS = ("temperature", "temp", "hot", "cold", "warm", "cool")
HIGH_MARKERS = ("high", "maximum", "max")
LOW_MARKERS = ("low", "minimum", "min")
PRECIPITATION_MARKERS = ("rain", "snow", "precipitation", "shower", "drizzle", "storm")
HUMIDITY_MARKERS = ("humidity", "humid")
WIND_MARKERS = ("wind", "breeze", "gust")

UNIT_LABELS = {
    "imperial": ("degrees", "miles per hour"),
    "metric": ("degrees", "meters per second"),
    "standard": ("kelvin", "meters per second"),
}


def _whole(value: Any) -> int | None:
    if not isinstance(value, (int, float)):
        return None
    return int(round(float(value)))


def _local_datetime(timestamp: Any, timezone_shift: int) -> datetime | None:
    if not isinstance(timestamp, (int, float)):
        return None
    return datetime.fromtimestamp(int(timestamp) + timezone_shift, tz=timezone.utc)


def _first_description(entry: dict[str, Any]) -> str | None:
    weather_items = entry.get("weather") if isinstance(entry.get("weather"), list) else []
    weather_info = weather_items[0] if weather_items and isinstance(weather_items[0], dict) else {}
    description = weather_info.get("description")
    return description.strip() if isinstance(description, str) and description.strip() else None


def _condition_kind(condition: str | None) -> str:
    lowered = str(condition or "").strip().lower()
    if lowered in ("sunrise", "sunset"):
        return lowered
    if any(marker in lowered for marker in HIGH_MARKERS):
        return "high"
    if any(marker in lowered for marker in LOW_MARKERS):
        return "low"
    if any(marker in lowered for marker in TEMPERATURE_MARKERS):
        return "temperature"
    if any(marker in lowered for marker in PRECIPITATION_MARKERS):
        return "precipitation"
    if any(marker in lowered for marker in HUMIDITY_MARKERS):
        return "humidity"
    if any(marker in lowered for marker in WIND_MARKERS):
        return "wind"
    return "general"


def _precipitation_noun(condition: str | None) -> str:
    lowered = str(condition or "").lower()
    if "snow" in lowered:
        return "snow"
    if "rain" in lowered or "shower" in lowered or "drizzle" in lowered:
        return "rain"
    return "precipitation"


def summarize_current(payload: dict[str, Any]) -> dict[str, Any] | None:
    main_data = payload.get("main")
    if not isinstance(main_data, dict):
        return None
    timezone_shift = _whole(payload.get("timezone")) or 0
    wind_data = payload.get("wind") if isinstance(payload.get("wind"), dict) else {}
    sys_data = payload.get("sys") if isinstance(payload.get("sys"), dict) else {}
    return {
        "temperature": main_data.get("temp"),
        "temp_min": main_data.get("temp_min"),
        "temp_max": main_data.get("temp_max"),
        "humidity": main_data.get("humidity"),
        "wind_speed": wind_data.get("speed"),
        "precip_probability": None,
        "description": _first_description(payload),
        "sunrise": _local_datetime(sys_data.get("sunrise"), timezone_shift),
        "sunset": _local_datetime(sys_data.get("sunset"), timezone_shift),
        "observed_at": _local_datetime(payload.get("dt"), timezone_shift),
    }


def summarize_short_forecast(payload: dict[str, Any], target: date) -> dict[str, Any] | None:
    """Bucket the 3-hourly forecast entries that fall on ``target`` in local time."""
    entries = payload.get("list")
    if not isinstance(entries, list):
        return None
    city_info = payload.get("city") if isinstance(payload.get("city"), dict) else {}
    timezone_shift = _whole(city_info.get("timezone")) or 0

    temps: list[float] = []
    humidity: list[float] = []
    wind: list[float] = []
    pop: list[float] = []
    descriptions: list[str] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        local_time = _local_datetime(entry.get("dt"), timezone_shift)
        if local_time is None or local_time.date() != target:
            continue
        main_data = entry.get("main") if isinstance(entry.get("main"), dict) else {}
        wind_data = entry.get("wind") if isinstance(entry.get("wind"), dict) else {}
        if isinstance(main_data.get("temp"), (int, float)):
            temps.append(float(main_data["temp"]))
        if isinstance(main_data.get("humidity"), (int, float)):
            humidity.append(float(main_data["humidity"]))
        if isinstance(wind_data.get("speed"), (int, float)):
            wind.append(float(wind_data["speed"]))
        if isinstance(entry.get("pop"), (int, float)):
            pop.append(float(entry["pop"]) * 100)
        description = _first_description(entry)
        if description:
            descriptions.append(description)

    if not temps and not descriptions:
        return None

    first_sunrise = _local_datetime(city_info.get("sunrise"), timezone_shift)
    same_day = first_sunrise is not None and first_sunrise.date() == target
    return {
        "temperature": None,
        "temp_min": min(temps) if temps else None,
        "temp_max": max(temps) if temps else None,
        "humidity": sum(humidity) / len(humidity) if humidity else None,
        "wind_speed": max(wind) if wind else None,
        "precip_probability": max(pop) if pop else None,
        "description": Counter(descriptions).most_common(1)[0][0] if descriptions else None,
        "sunrise": first_sunrise if same_day else None,
        "sunset": _local_datetime(city_info.get("sunset"), timezone_shift) if same_day else None,
        "observed_at": None,
    }


def summarize_extended_forecast(payload: dict[str, Any], target: date) -> dict[str, Any] | None:
    """Pick the entry for ``target`` out of the daily forecast list."""
    entries = payload.get("list")
    if not isinstance(entries, list):
        return None
    city_info = payload.get("city") if isinstance(payload.get("city"), dict) else {}
    timezone_shift = _whole(city_info.get("timezone")) or 0
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        local_time = _local_datetime(entry.get("dt"), timezone_shift)
        if local_time is None or local_time.date() != target:
            continue
        temp_data = entry.get("temp") if isinstance(entry.get("temp"), dict) else {}
        pop_value = entry.get("pop")
        return {
            "temperature": None,
            "temp_min": temp_data.get("min"),
            "temp_max": temp_data.get("max"),
            "humidity": entry.get("humidity"),
            "wind_speed": entry.get("speed"),
            "precip_probability": float(pop_value) * 100 if isinstance(pop_value, (int, float)) else None,
            "description": _first_description(entry),
            "sunrise": _local_datetime(entry.get("sunrise"), timezone_shift),
            "sunset": _local_datetime(entry.get("sunset"), timezone_shift),
            "observed_at": None,
        }
    return None


def compose_weather_sentence(
    condition: str | None,
    date_descriptor: DateDescriptor,
    summary: dict[str, Any],
    units: str = WEATHER_UNITS,
) -> str:
    """Phrase one weather fact for ``condition`` the way it will be read aloud."""
    degrees, speed_unit = UNIT_LABELS.get(units, UNIT_LABELS["imperial"])
    kind = _condition_kind(condition)
    current = date_descriptor.data_granularity == DataGranularity.CURRENT_CONDITIONS
    lead_in = date_descriptor.lead_in

    if kind in ("sunrise", "sunset"):
        moment = summary.get(kind)
        if not isinstance(moment, datetime):
            return NO_DATA_FOR_DAY.format(label=kind)
        phrase = " today" if current else date_descriptor.display_phrase
        return f"{kind.capitalize()}{phrase} is at {format_time_am_pm(moment)}."

    temperature = _whole(summary.get("temperature"))
    temp_min = _whole(summary.get("temp_min"))
    temp_max = _whole(summary.get("temp_max"))
    description = summary.get("description")

    if kind == "temperature":
        if current and temperature is not None:
            body = f"The temperature{lead_in}{temperature} {degrees}"
        elif temp_min is not None and temp_max is not None:
            body = f"The temperature{lead_in}between {temp_min} and {temp_max} {degrees}"
        else:
            return NO_DATA_FOR_DAY.format(label="temperature")
    elif kind == "high":
        if temp_max is None:
            return NO_DATA_FOR_DAY.format(label="temperature")
        body = f"The high{lead_in}{temp_max} {degrees}"
    elif kind == "low":
        if temp_min is None:
            return NO_DATA_FOR_DAY.format(label="temperature")
        body = f"The low{lead_in}{temp_min} {degrees}"
    elif kind == "precipitation" and not current:
        probability = _whole(summary.get("precip_probability"))
        if probability is None:
            return NO_DATA_FOR_DAY.format(label="precipitation")
        body = f"The chance of {_precipitation_noun(condition)}{lead_in}{probability}%"
    elif kind == "humidity":
        humidity = _whole(summary.get("humidity"))
        if humidity is None:
            return NO_DATA_FOR_DAY.format(label="humidity")
        body = f"The humidity{lead_in}{humidity}%"
    elif kind == "wind":
        wind_speed = _whole(summary.get("wind_speed"))
        if wind_speed is None:
            return NO_DATA_FOR_DAY.format(label="wind")
        body = f"The wind speed{lead_in}{wind_speed} {speed_unit}"
    elif current:
        if not description:
            return NO_DATA_FOR_DAY.format(label="weather")
        body = f"The weather{lead_in}{description}"
        if temperature is not None:
            body += f" and {temperature} {degrees}"
    else:
        if not description:
            return NO_DATA_FOR_DAY.format(label="weather")
        body = f"The weather{lead_in}{description}"
        if temp_min is not None and temp_max is not None:
            body += f" with a high of {temp_max} and a low of {temp_min} {degrees}"

    observed_at = summary.get("observed_at")
    if current and isinstance(observed_at, datetime):
        body += f", as of {format_time(observed_at)}"
    return body + "."


class OpenWeatherProvider:
    """Weather lookups against OpenWeather, answered as ask/tell replies."""

    def __init__(
        self,
        api_key: str | None,
        units: str = WEATHER_UNITS,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        logger: logging.Logger | None = None,
    ) -> None:
        self.api_key = api_key
        self.units = units
        self.timeout = timeout
        self.logger = logger or LOGGER

    def _fetch_payload(self, endpoint_url: str, params: dict[str, Any]) -> Any | None:
        try:
            response = requests.get(endpoint_url, params={**params, "appid": self.api_key}, timeout=self.timeout)
        except requests.RequestException as exc:
            self.logger.warning("weather request to %s failed: %s", endpoint_url, exc)
            return None
        if response.status_code != 200:
            self.logger.warning("weather request to %s returned %s", endpoint_url, response.status_code)
            return None
        try:
            return response.json()
        except ValueError:
            self.logger.warning("weather request to %s returned malformed JSON", endpoint_url)
            return None

    def geocode(self, query: str) -> list[dict[str, Any]] | None:
        payload = self._fetch_payload(OPENWEATHER_GEOCODING_URL, {"q": query, "limit": GEOCODING_LIMIT})
        if not isinstance(payload, list):
            return None
        return [place for place in payload if isinstance(place, dict)]

    def find_places(self, city: str, state: Any) -> list[dict[str, Any]] | None:
        """
        Geocode ``city`` and keep the places that lie in ``state``.

        The plain city query finds every state offered as an option, in any
        country. The ``city,state,US`` query is only tried when none of those
        places match.
        """
        places = self.geocode(city)
        if places is None or not (isinstance(state, str) and state.strip()):
            return places
        wanted = state.strip().lower()
        matching = [place for place in places if str(place.get("state") or "").strip().lower() == wanted]
        if matching:
            return matching
        return self.geocode(f"{city},{state},US")

    def _summary_for(self, place: dict[str, Any], date_descriptor: DateDescriptor) -> dict[str, Any] | None:
        coordinates = {"lat": place.get("lat"), "lon": place.get("lon"), "units": self.units}
        granularity = date_descriptor.data_granularity
        if granularity == DataGranularity.CURRENT_CONDITIONS:
            payload = self._fetch_payload(OPENWEATHER_API_URL, coordinates)
            return summarize_current(payload) if isinstance(payload, dict) else None

        target = date(date_descriptor.year, date_descriptor.month, date_descriptor.day)
        if granularity == DataGranularity.SHORT_FORECAST:
            payload = self._fetch_payload(OPENWEATHER_FORECAST_URL, coordinates)
            return summarize_short_forecast(payload, target) if isinstance(payload, dict) else None

        payload = self._fetch_payload(OPENWEATHER_DAILY_URL, {**coordinates, "cnt": DAILY_FORECAST_DAYS})
        return summarize_extended_forecast(payload, target) if isinstance(payload, dict) else None

    def lookup(
        self,
        condition: str | None,
        city: str | None,
        state: str | None,
        date_descriptor: DateDescriptor,
    ) -> WeatherReply:
        self.logger.debug(
            "lookup condition=%s city=%s state=%s granularity=%s",
            condition,
            city,
            state,
            date_descriptor.data_granularity.value,
        )
        if not self.api_key:
            return WeatherReply(tell=WEATHER_LIVE_DATA_UNAVAILABLE, state=state)
        if not city:
            return WeatherReply(ask="Which city would you like the weather for?", state=state)

        places = self.find_places(city, state)
        if places is None:
            return WeatherReply(tell=WEATHER_LIVE_DATA_UNAVAILABLE, state=state)
        if not places:
            return WeatherReply(tell=f"I'm sorry, I couldn't find {city}.", state=state)

        if not state:
            regions: set[tuple[str, str]] = set()
            states: list[str] = []
            for place in places:
                place_state = place.get("state")
                if not isinstance(place_state, str) or not place_state:
                    continue
                regions.add((place_state, str(place.get("country") or "")))
                if place_state not in states:
                    states.append(place_state)
            if len(regions) > 1:
                self.logger.debug("ambiguous city=%s options=%s", city, states)
                return WeatherReply(ask=f"There is more than one {city}. Which state is it in?", options=states)

        place = places[0]
        resolved_state = place.get("state") if isinstance(place.get("state"), str) else state
        summary = self._summary_for(place, date_descriptor)
        if summary is None:
            if date_descriptor.data_granularity == DataGranularity.CURRENT_CONDITIONS:
                return WeatherReply(tell=WEATHER_LIVE_DATA_UNAVAILABLE, state=resolved_state)
            return WeatherReply(tell=NO_DATA_FOR_DAY.format(label="forecast"), state=resolved_state)

        sentence = compose_weather_sentence(condition, date_descriptor, summary, units=self.units)
        self.logger.debug("reply city=%s state=%s tell=%s", city, resolved_state, sentence)
        return WeatherReply(tell=sentence, state=resolved_state)
