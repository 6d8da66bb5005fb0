import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, FastAPI
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .config import OPENWEATHER_API_KEY, STATIC_DIR, WORKSPACE_PLACEHOLDER, configure_logging, workspace_id
from .conversation_service import ConversationService, ConversationServiceError
from .schemas import ConversationReply, MessageRequest
from .slots import parse_slot, resolve_city, resolve_state
from .weather_resolver import WeatherProvider, compose_running_line, resolve_weather
from .weather_service import OpenWeatherProvider

LOGGER = logging.getLogger("weather_bridge.api")

WEATHER_ACTION = "get_weather"
DEFAULT_DATE_TOKEN = "current"

WORKSPACE_NOT_CONFIGURED_MESSAGE = (
    "The app has not been configured with a <b>WORKSPACE_ID</b> environment variable. Please refer to the "
    '<a href="https://github.com/watson-developer-cloud/conversation-simple">README</a> documentation on how '
    "to set this variable. <br>"
    "Once a workspace has been defined the intents may be imported from "
    '<a href="https://github.com/watson-developer-cloud/conversation-simple/blob/master/training/car_workspace.json">'
    "here</a> in order to get a working application."
)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    configure_logging()
    yield


app = FastAPI(lifespan=lifespan)
conversation_service = ConversationService()
weather_provider: WeatherProvider = OpenWeatherProvider(OPENWEATHER_API_KEY)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


def make_weather_request(reply: ConversationReply, lines: list[str], provider: WeatherProvider) -> str | list[str]:
    """
    Resolve the weather slots in ``reply.context`` and fetch the answer.

    The last output line ("<Condition> in ") is extended in place with the
    resolved city and state; the returned text is the line to show after it.
    """
    context = reply.context
    if "city" in context:
        context["city"] = resolve_city(parse_slot(context["city"]))
    city = context.get("city")
    if context.get("state"):
        context["state"] = resolve_state(parse_slot(context["state"]), city)

    LOGGER.debug(
        "weather request condition=%s city=%s state=%s date=%s",
        context.get("condition"),
        city,
        context.get("state"),
        context.get("date"),
    )
    weather_reply = resolve_weather(
        context.get("condition"),
        city,
        context.get("state"),
        context.get("date") or DEFAULT_DATE_TOKEN,
        provider,
    )
    lines[-1] = compose_running_line(lines[-1], city, weather_reply.state)

    if weather_reply.ask:
        context["asked_state"] = True
    return weather_reply.text


def process_turn(
    payload: MessageRequest,
    service: ConversationService,
    provider: WeatherProvider,
) -> dict[str, Any] | JSONResponse:
    workspace = workspace_id()
    if not workspace or workspace == WORKSPACE_PLACEHOLDER:
        return {"output": {"text": WORKSPACE_NOT_CONFIGURED_MESSAGE}}

    try:
        data = service.message(workspace, input=payload.input, context=payload.context)
    except ConversationServiceError as exc:
        return JSONResponse(status_code=exc.code, content=exc.error)

    reply = ConversationReply.model_validate(data)
    raw_text = reply.output.text
    lines = list(raw_text) if isinstance(raw_text, list) else [raw_text]
    LOGGER.debug("conversation output=%s", lines)

    if reply.output.action == WEATHER_ACTION and lines:
        response_text = make_weather_request(reply, lines, provider)
        LOGGER.debug("weather response=%s", response_text)
        if isinstance(response_text, list):
            output_text: str | list[str] = response_text
        else:
            output_text = [lines[-1], response_text]
    else:
        output_text = lines[-1] if lines else ""

    raw_output = data.get("output") if isinstance(data.get("output"), dict) else {}
    return {**data, "output": {**raw_output, "text": output_text}, "context": reply.context}


@app.post("/api/message")
def message(payload: MessageRequest | None = Body(default=None)) -> Any:
    return process_turn(payload or MessageRequest(), conversation_service, weather_provider)


if STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")
