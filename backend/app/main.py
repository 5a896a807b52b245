import os
import subprocess
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.database import init_db
from app.routes import leaderboard, results, schedule

APP_NAME = "Round Robin Scheduler API"


# Get build info
def get_build_info():
    """Get git commit hash or build timestamp"""
    try:
        # Try to get git commit hash
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=os.path.dirname(os.path.dirname(__file__)),
            capture_output=True,
            text=True,
            timeout=2,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError):
        pass

    # Fallback to build timestamp
    return datetime.now().strftime("%Y%m%d-%H%M%S")


BUILD_HASH = get_build_info()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()  # Imports models and creates tables
    yield


app = FastAPI(title=APP_NAME, lifespan=lifespan)

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(schedule.router, prefix="/api", tags=["schedule"])
app.include_router(leaderboard.router, prefix="/api", tags=["leaderboard"])
app.include_router(results.router, prefix="/api", tags=["results"])


@app.get("/api/health")
def health_check():
    """Diagnostic endpoint to verify which code is running"""
    return {"app_name": APP_NAME, "build_hash": BUILD_HASH, "status": "healthy"}
