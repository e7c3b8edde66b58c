from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
from dotenv import load_dotenv

from db import Base, engine
from models.models_user import User  # noqa: F401  (registers the users table)
from chances import models as chances_models  # noqa: F401  (registers the chances tables)
from chances.routes import router as chances_router, load_llm_client

load_dotenv()

logging.basicConfig(level=logging.INFO)
logging.info("App starting with DATABASE_URL")

app = FastAPI(title="Admission Chances API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Base.metadata.create_all(bind=engine)

app.include_router(chances_router)


# One LLM client (and connection pool) for the whole app
@app.on_event("startup")
def startup_event():
    app.state.llm_client = load_llm_client()


@app.on_event("shutdown")
async def shutdown_event():
    llm = getattr(app.state, "llm_client", None)
    if llm is not None:
        await llm.aclose()


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}
