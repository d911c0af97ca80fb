from typing import Optional

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from .config import Settings, load_settings
from .middleware import JSONBodyMiddleware

GREETING = "Hello, World!"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="Hello API", version="1.0.0")
    app.add_middleware(JSONBodyMiddleware, limit=settings.json_limit)

    @app.get("/", response_class=HTMLResponse)
    def hello() -> str:
        return GREETING

    return app


app = create_app()
