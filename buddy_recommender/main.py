# Create the FastAPI app, connect to MongoDB on startup and mount the
# friend recommendation and health routes.

from typing import Optional

from fastapi import FastAPI
import uvicorn

from buddy_recommender.config.settings import Settings
from buddy_recommender.db.client import connect_to_mongo, close_mongo_connection
from buddy_recommender.routes import health, recommendation_routes
from buddy_recommender.utils.logger import configure_root_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_root_logging(settings.LOG_LEVEL)
    app = FastAPI(title="Accountability Buddy Recommendations API")

    @app.on_event("startup")
    async def startup_event():
        # Ensure MongoDB connection is established
        await connect_to_mongo(settings)

    @app.on_event("shutdown")
    async def shutdown_event():
        await close_mongo_connection()

    app.include_router(health.router)
    app.include_router(recommendation_routes.router)

    return app


if __name__ == "__main__":
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
