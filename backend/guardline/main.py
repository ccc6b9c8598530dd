import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager

from guardline.database import create_db_and_tables
from guardline.config import settings
from guardline.exceptions import register_exception_handlers
from guardline.logging_config import configure_logging
from guardline.auth.router import router as auth_router
from guardline.users.router import router as users_router
from guardline.inquiries.router import router as inquiries_router
from guardline.leads.router import router as leads_router
from guardline.clients.router import router as clients_router
from guardline.projects.router import router as projects_router
from guardline.tasks.router import router as tasks_router
from guardline.leads.history_models import LeadHistory  # noqa: F401  registers the table

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    create_db_and_tables()
    logger.info("%s %s started", settings.APP_TITLE, settings.APP_VERSION)
    yield

app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(inquiries_router)
app.include_router(leads_router)
app.include_router(clients_router)
app.include_router(projects_router)
app.include_router(tasks_router)

@app.get("/")
def read_root():
    return {"message": f"Welcome to the {settings.APP_TITLE} API"}
