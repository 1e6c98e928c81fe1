import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

load_dotenv(dotenv_path=Path(__file__).parent / ".env", override=True)

from staffdesk import config

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="StaffDesk API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Register feature routers ---
from staffdesk.routers.auth import router as auth_router
from staffdesk.routers.tasks import router as tasks_router
from staffdesk.routers.goals import router as goals_router
from staffdesk.routers.timesheets import router as timesheets_router
from staffdesk.routers.appraisals import router as appraisals_router
from staffdesk.routers.calendar import router as calendar_router
from staffdesk.routers.performance import router as performance_router
from staffdesk.routers.settings import router as settings_router
from staffdesk.routers.revalidate import router as revalidate_router

app.include_router(auth_router)
app.include_router(tasks_router)
app.include_router(goals_router)
app.include_router(timesheets_router)
app.include_router(appraisals_router)
app.include_router(calendar_router)
app.include_router(performance_router)
app.include_router(settings_router)
app.include_router(revalidate_router)

if config.AUTH_MODE == "demo":
    logger.warning("AUTH_MODE=demo: X-User-Id header is trusted for identity")


@app.get("/health")
def health():
    return {"ok": True}
