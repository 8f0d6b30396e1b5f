import json

from fastapi import APIRouter, Depends, Request, Response

from services.analytics_service import AnalyticsService, get_analytics_service

router = APIRouter(tags=["analytics"])

BEACON_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Vary": "Origin",
}

@router.options("/analytics")
async def analytics_preflight():
    return Response(status_code=204, headers=BEACON_HEADERS)

@router.post("/analytics")
async def record_usage(request: Request, analytics: AnalyticsService = Depends(get_analytics_service)):
    """Count a usage beacon. Always answers 204 so beacons stay silent."""
    try:
        payload = json.loads(await request.body() or b"{}")
    except ValueError:
        payload = {}

    try:
        event = analytics.parse_event(payload)
        await analytics.record(event)
    except Exception as error:
        print(f"[ANALYTICS] Dropping beacon: {error}")

    return Response(status_code=204, headers=BEACON_HEADERS)
