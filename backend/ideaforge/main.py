import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401  (registers tables on Base.metadata)
from .agents.idea_analysis.http_client import create_client
from .config import Settings
from .database import Base, engine
from .routes import analyze_router, chat_router, compare_router, history_router
from .services.llm_client import LLMClient


# Load environment variables from .env file
load_dotenv()

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

settings = Settings.from_env()


@asynccontextmanager
async def lifespan(app: FastAPI):

    # Startup
    http_client = create_client()
    app.state.settings = settings
    app.state.http_client = http_client
    app.state.llm_client = LLMClient.from_settings(settings, http_client)
    Base.metadata.create_all(bind=engine)

    print("Starting IdeaForge validation backend")
    print(f"   Gemini Key:  {' Configured' if settings.google_api_key else ' Not set'}")
    print(f"   OpenAI Key:  {' Configured' if settings.openai_api_key else ' Not set'}")
    print(f"   NewsAPI Key: {' Configured' if settings.news_api_key else ' Not set (news skipped)'}")
    if not settings.has_llm_credentials:
        print("   No LLM key: analyses use the deterministic scoring engine")
    print("   Ready to validate startup ideas!")

    yield

    await http_client.aclose()
    print("Shutting down IdeaForge validation backend")


app = FastAPI(
    title="IdeaForge AI: Startup Idea Validation",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],  # Allow all HTTP methods
    allow_headers=["*"],  # Allow all headers
    expose_headers=["X-Analysis-Strategy"],
)

app.include_router(analyze_router)
app.include_router(compare_router)
app.include_router(chat_router)
app.include_router(history_router)


@app.get(
    "/",
    summary="API Root",
    description="Welcome endpoint with API information",
    tags=["General"]
)
async def root():
    """Root endpoint with API information."""
    return {
        "name": "IdeaForge AI",
        "version": "0.1.0",
        "description": "AI-powered startup idea validation",
        "docs": "/docs",
        "endpoints": {
            "analyze": "POST /analyze - Validate a startup idea",
            "compare": "POST /compare - Compare an idea against real-world data",
            "chat": "POST /chat - Chat with the AI Co-Founder",
            "history": "GET|POST|DELETE /history - Saved validations",
            "health": "GET /health - Service health check",
        }
    }


@app.get(
    "/health",
    summary="Global Health Check",
    description="Check if the API server is running",
    tags=["General"]
)
async def health():
    """Global health check endpoint."""
    return {
        "status": "healthy",
        "service": "ideaforge-validator",
        "version": "0.1.0"
    }


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies: say what was wrong and how to fix it."""
    errors = exc.errors()
    fields = sorted({".".join(str(p) for p in e.get("loc", ())[1:]) for e in errors if e.get("loc")})
    return JSONResponse(
        status_code=422,
        content={
            "error": "Invalid request",
            "hint": f"Check these fields: {', '.join(f for f in fields if f)}" if fields else "Check the request body",
            "detail": jsonable_errors(errors),
        }
    )


def jsonable_errors(errors):
    """Drop non-serializable context (exception instances) from pydantic errors."""
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in errors
    ]


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler for unhandled errors."""
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal server error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ideaforge.main:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("DEBUG", "true").lower() == "true",
    )
