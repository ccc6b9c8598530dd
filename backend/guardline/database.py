from sqlmodel import SQLModel, create_engine, Session
from guardline.config import settings

# sqlite needs the same-thread check off because FastAPI serves sync routes from a threadpool
connect_args = {"check_same_thread": False} if "sqlite" in settings.DATABASE_URL else {}
engine = create_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, connect_args=connect_args)

def create_db_and_tables():
    SQLModel.metadata.create_all(engine)

def get_session():
    with Session(engine) as session:
        yield session
