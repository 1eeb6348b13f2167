import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError

from infraflow import __version__
from infraflow.api.routes import router
from infraflow.config import settings
from infraflow.db.models import Base
from infraflow.db.session import engine

app = FastAPI(
    title="InfraFlow",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


def create_tables(retries: int = 5, delay: float = 2) -> bool:
    """Create tables, retrying while the database comes up. False if it never does."""
    for attempt in range(retries):
        try:
            Base.metadata.create_all(bind=engine)
            print("[DB] ✅ Tables ready")
            return True
        except OperationalError:
            print(f"[DB] Database unavailable, retrying ({attempt + 1}/{retries})")
            time.sleep(delay)

    print("[DB] ⚠️ Database not ready, parse logging disabled")
    return False


@app.on_event("startup")
def startup():
    create_tables()
