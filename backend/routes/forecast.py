"""Forecast routes — sunsign index and per-sign weekly forecast."""

import logging

from fastapi import APIRouter, Depends, Request

from services import topics
from services.refresh import RefreshPipeline

logger = logging.getLogger(__name__)

router = APIRouter()


def get_pipeline(request: Request) -> RefreshPipeline:
    return request.app.state.pipeline


@router.get("/")
async def index() -> dict:
    """List every sunsign with its date range and forecast link."""
    signs = topics.sorted_signs()
    return {
        "_summary": f"Weekly sunsign horoscope forecasts for {len(signs)} signs",
        "forecasts": [
            {
                "sign": sign,
                "date_range": topics.get_topic(sign).date_range,
                "label": topics.label(sign),
                "url": f"/forecast/{sign}",
            }
            for sign in signs
        ],
    }


@router.get("/forecast/{sign}")
async def forecast(
    sign: str,
    request: Request,
    pipeline: RefreshPipeline = Depends(get_pipeline),
) -> dict:
    """Weekly forecast for one sign, served from cache when fresh."""
    sign = sign.lower()
    result = await pipeline.resolve(sign)

    return {
        "_summary": f"{sign}: {result.title}" if result.title else f"{sign} weekly forecast",
        "sign": sign,
        "title": result.title,
        "forecast": result.body,
        "date_range": topics.get_topic(sign).date_range,
        "source_url": topics.source_url(sign, request.app.state.settings.source_base_url),
    }
