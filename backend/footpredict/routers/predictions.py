"""
Predictions router.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from footpredict.models.common import ErrorResponse
from footpredict.models.predictions import (
    PredictionListResponse,
    PredictionsMeta,
    PredictionStatsResponse,
    StatsMeta,
)
from footpredict.services.factory import get_prediction_service
from footpredict.services.prediction_service import PredictionService, PredictionsResult
from footpredict.utils.dates import validate_match_date
from footpredict.utils.exceptions import BadRequestException, InternalServerException, InvalidDateError
from footpredict.utils.logger import logger

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or invalid date. Use YYYY-MM-DD format."},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def require_date(date: Optional[str]) -> str:
    try:
        return validate_match_date(date)
    except InvalidDateError as e:
        raise BadRequestException(str(e))


def build_list_response(date: str, result: PredictionsResult, team_filter: Optional[str]) -> PredictionListResponse:
    return PredictionListResponse(
        data=[p.as_prediction() for p in result.predictions],
        meta=PredictionsMeta(
            date=date,
            count=len(result.predictions),
            cached=result.cached,
            filter=team_filter or None,
        ),
    )


@router.get(
    "",
    response_model=PredictionListResponse,
    response_model_exclude_none=True,
    responses={200: {"description": "Predictions retrieved successfully"}, **ERROR_RESPONSES},
)
async def get_predictions(
    date: Optional[str] = Query(None, description="Date in YYYY-MM-DD format", examples=["2025-08-14"]),
    team_filter: Optional[str] = Query(None, alias="teamFilter", description="Filter by team name (partial match)"),
    include_all: bool = Query(False, alias="includeAll", description="Include all predictions, not just >50% home win chance"),
    service: PredictionService = Depends(get_prediction_service),
):
    """
    Get football predictions for a date.

    Returns matches with >50% home team win chance unless **includeAll** is set.
    Data is cached for 2 hours.
    """
    date = require_date(date)
    logger.info(f"Getting predictions for date: {date}{f', team filter: {team_filter}' if team_filter else ''}")

    try:
        result = await service.query(date, team_filter, only_home_favourites=not include_all)
    except Exception as e:
        logger.error(f"Error getting predictions: {e}", exc_info=True)
        raise InternalServerException("Failed to retrieve predictions")

    return build_list_response(date, result, team_filter)


@router.get(
    "/all",
    response_model=PredictionListResponse,
    response_model_exclude_none=True,
    responses={200: {"description": "All predictions retrieved successfully"}, **ERROR_RESPONSES},
)
async def get_all_predictions(
    date: Optional[str] = Query(None, description="Date in YYYY-MM-DD format", examples=["2025-08-14"]),
    team_filter: Optional[str] = Query(None, alias="teamFilter", description="Filter by team name (partial match)"),
    service: PredictionService = Depends(get_prediction_service),
):
    """Get all football predictions for a date regardless of win percentage."""
    date = require_date(date)
    logger.info(f"Getting all predictions for date: {date}{f', team filter: {team_filter}' if team_filter else ''}")

    try:
        result = await service.get_all_predictions_for_date(date, team_filter)
    except Exception as e:
        logger.error(f"Error getting all predictions: {e}", exc_info=True)
        raise InternalServerException("Failed to retrieve all predictions")

    return build_list_response(date, result, team_filter)


@router.get(
    "/stats",
    response_model=PredictionStatsResponse,
    responses={200: {"description": "Statistics retrieved successfully"}, **ERROR_RESPONSES},
)
async def get_prediction_stats(
    date: Optional[str] = Query(None, description="Date in YYYY-MM-DD format", examples=["2025-08-14"]),
    service: PredictionService = Depends(get_prediction_service),
):
    """
    Get prediction statistics for a date.

    Counts by win chance bucket, competition and country, plus the home odds
    range, over all predictions for the date.
    """
    date = require_date(date)
    logger.info(f"Getting prediction statistics for date: {date}")

    try:
        stats, cached = await service.get_stats_for_date(date)
    except Exception as e:
        logger.error(f"Error getting prediction statistics: {e}", exc_info=True)
        raise InternalServerException("Failed to retrieve prediction statistics")

    return PredictionStatsResponse(data=stats, meta=StatsMeta(date=date, cached=cached))
