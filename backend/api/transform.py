from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from models.transform import ErrorResponse, ProxyResponse, TransformResponse
from services.transform_service import TransformProxy, get_transform_proxy

router = APIRouter(tags=["transform"])

def to_response(result: ProxyResponse) -> Response:
    """Convert a ProxyResponse into a FastAPI response"""
    if result.body is None:
        return Response(status_code=result.status_code, headers=result.headers)
    return JSONResponse(content=result.body, status_code=result.status_code, headers=result.headers)

@router.get("/transform/health")
async def check_transform_config(proxy: TransformProxy = Depends(get_transform_proxy)):
    """Check if the image API is properly configured"""
    has_key = proxy.settings.upstream_configured

    return {
        "configured": has_key,
        "style": proxy.settings.TRANSFORM_STYLE,
        "message": "OPENAI_API_KEY configured" if has_key else "OPENAI_API_KEY not set"
    }

# Every method goes to the proxy so OPTIONS and 405s follow the same contract as POST
@router.api_route(
    "/transform",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    responses={
        200: {"model": TransformResponse},
        400: {"model": ErrorResponse},
        413: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    }
)
async def transform(request: Request, proxy: TransformProxy = Depends(get_transform_proxy)):
    """Stylize an uploaded image with the deployment's fixed prompt"""
    # Raw body: malformed JSON is the proxy's 400, not a FastAPI 422
    body = await request.body()
    result = await proxy.dispatch(request.method, body)
    return to_response(result)
