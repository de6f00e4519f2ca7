import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blog_api.config import CORS_ORIGINS, ENV, SERVER_HOST, SERVER_PORT, setup_logging
from blog_api.database import engine, Base
from blog_api.errors import BlogError
from blog_api import models  # noqa: F401  (registers tables on Base)
from blog_api.api.users import router as users_router
from blog_api.api.categories import router as categories_router
from blog_api.api.posts import router as posts_router
from blog_api.api.tags import router as tags_router
from blog_api.api.comments import router as comments_router
from blog_api.schemas import HealthResponse

setup_logging()
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Blog API",
    docs_url=None if ENV == "prod" else "/docs",
    redoc_url=None if ENV == "prod" else "/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(BlogError)
async def blog_error_handler(request: Request, exc: BlogError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.get("/health", response_model=HealthResponse)
def health_check():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


app.include_router(users_router)
app.include_router(categories_router)
app.include_router(posts_router)
app.include_router(tags_router)
app.include_router(comments_router)


if __name__ == "__main__":
    import uvicorn

    logger.info("Blog API server listening at port: %s", SERVER_PORT)
    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)
