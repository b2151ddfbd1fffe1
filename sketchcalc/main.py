import logging
from fastapi import FastAPI
from .config import load_settings
from .sessions import SessionRegistry
from .board.api import router as board_router

settings = load_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Sketch Calculator")
app.include_router(board_router)
app.state.sessions = SessionRegistry(settings)


@app.get("/health")
def health():
    return {"status": "ok", "calculate_url": app.state.sessions.get_client().endpoint}
