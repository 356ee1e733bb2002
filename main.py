"""
Workout Tracker Feedback Service
FastAPI application for rule-based training feedback

Run with: uvicorn main:app --reload --port 8000
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

# Import routers
from routers import analytics_router, recovery_router, calories_router
from services import ServiceRegistry

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",   # Node.js API
    "http://localhost:8080",   # Frontend dev server
    "http://127.0.0.1:5500",   # VS Code Live Server
    "null"                      # Local file:// access
]


def cors_origins():
    """Comma-separated CORS_ORIGINS, or the local dev origins"""
    configured = os.getenv("CORS_ORIGINS")
    if not configured:
        return DEFAULT_CORS_ORIGINS
    return [origin.strip() for origin in configured.split(",") if origin.strip()]


# Create FastAPI app
app = FastAPI(
    title="Workout Tracker Feedback",
    description="""
    ## Rule-Based Training Feedback

    This service turns logged workouts into feedback for the Workout Tracker:

    ### Analytics
    - **Progressive Overload**: Session-to-session progress, stagnation and PRs
    - **Plateau Detection**: Complete, weight and volume plateaus with strategies
    - **Post-Workout Summary**: Achievements, warnings and suggestions

    ### Recovery
    - **Weekly Advice**: Muscle group frequency, rest days, volume and intensity
    - **Rest Day Check**: Whether today should be a rest day
    - **Recovery Score**: 0-100 score with a rating

    ### Calories
    - **MET Estimates**: Cardio, strength, HIIT and full circuit workouts

    ---

    **Tech Stack**: Python, FastAPI, SQLAlchemy, pandas, scikit-learn
    """,
    version="1.0.0",
    docs_url="/docs",  # Swagger UI
    redoc_url="/redoc"  # ReDoc alternative
)

# One analytics service per user, shared across requests
app.state.registry = ServiceRegistry()

# Configure CORS to allow requests from frontend and Node API
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Check if the feedback service is running"""
    return {
        "status": "healthy",
        "service": "workout-tracker-feedback",
        "version": "1.0.0"
    }


# Include routers
app.include_router(analytics_router)
app.include_router(recovery_router)
app.include_router(calories_router)


# Root endpoint with service info
@app.get("/", tags=["Info"])
async def root():
    """Service information and available endpoints"""
    return {
        "service": "Workout Tracker Feedback",
        "version": "1.0.0",
        "documentation": "/docs",
        "endpoints": {
            "analytics": {
                "initialize": "POST /analytics/{user_id}/initialize",
                "log_workout": "POST /analytics/{user_id}/workouts",
                "feedback": "GET /analytics/{user_id}/feedback",
                "post_workout_summary": "POST /analytics/{user_id}/post-workout-summary",
                "dashboard": "GET /analytics/{user_id}/dashboard",
                "reset": "DELETE /analytics/{user_id}"
            },
            "recovery": {
                "advice": "GET /recovery/{user_id}/advice",
                "should_rest": "GET /recovery/{user_id}/should-rest",
                "score": "GET /recovery/{user_id}/score"
            },
            "calories": {
                "cardio": "GET /calories/cardio",
                "strength": "GET /calories/strength",
                "per_minute": "GET /calories/per-minute",
                "hiit": "POST /calories/hiit",
                "workout": "POST /calories/workout"
            }
        }
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
