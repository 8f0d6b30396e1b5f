from fastapi import FastAPI
import os

# Only load .env file if not running on Heroku
if not os.getenv("DYNO"):  # DYNO is a Heroku-specific environment variable
    from dotenv import load_dotenv
    load_dotenv()
    print("🔧 Local development: Loaded .env file")
else:
    print("☁️ Running on Heroku: Using environment variables")

from config.settings import settings
from api import transform, analytics

app = FastAPI(title=f"{settings.PROJECT_NAME} API", version=settings.VERSION)

# CORS headers are set by the transform and analytics routes themselves:
# preflights must answer 204 and every response, errors included, carries them

# Include API routers
app.include_router(transform.router, prefix=settings.API_V1_STR)
app.include_router(analytics.router, prefix=settings.API_V1_STR)

@app.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} API is running"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

@app.get("/api/health")
async def api_health_check():
    return {"status": "healthy", "service": "api"}

@app.get("/api/environment")
async def get_environment_info():
    is_heroku = bool(os.getenv("DYNO"))
    return {
        "environment": "heroku" if is_heroku else "local",
        "is_heroku": is_heroku,
        "port": os.getenv("PORT", str(settings.PORT)),
        "style": settings.TRANSFORM_STYLE,
        "config_source": "heroku_env" if is_heroku else "dotenv_file"
    }

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", settings.PORT))
    uvicorn.run(app, host=settings.HOST, port=port)
