from contextlib import asynccontextmanager

from fastapi import FastAPI

from movieinfo.api.health import router as health_router
from movieinfo.api.search import router as search_router
from movieinfo.core.container import AppContainer
from movieinfo.core.errors import register_error_handlers
from movieinfo.core.logging import configure_logging
from movieinfo.core.settings import get_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    app.state.settings = settings
    app.state.container = AppContainer(settings)
    yield
    await app.state.container.close()


app = FastAPI(title="MovieInfo Search API", version="0.1.0", lifespan=lifespan)
register_error_handlers(app)

app.include_router(health_router)
app.include_router(search_router)
