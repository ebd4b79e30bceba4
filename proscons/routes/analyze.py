from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from proscons.core.errors import BadRequest
from proscons.core.settings import Settings, get_settings
from proscons.schemas.analysis import AnalysisResult, AnalyzeRequest, ErrorResponse
from proscons.services.agent import ProsConsAgent

router = APIRouter(prefix="/analyze", tags=["analyze"])


def get_agent(settings: Settings = Depends(get_settings)) -> ProsConsAgent:
    return ProsConsAgent(settings)


@router.post(
    "",
    response_model=None,
    responses={
        200: {"model": AnalysisResult, "description": "Parsed analysis, or a text/plain token stream"},
        400: {"model": ErrorResponse},
        405: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def analyze(payload: AnalyzeRequest, agent: ProsConsAgent = Depends(get_agent)):
    topic = payload.topic
    if not topic or not topic.strip():
        raise BadRequest()

    stream = agent.settings.llm_stream if payload.stream is None else payload.stream
    if stream:
        relay = await agent.open_stream(topic)
        return StreamingResponse(
            relay,
            media_type="text/plain; charset=utf-8",
            background=BackgroundTask(relay.aclose),
        )

    return JSONResponse(await agent.analyze(topic))
