import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from cartql.core.config import settings
from cartql.db.session import create_db_and_tables

# Import models to ensure they are registered with SQLModel metadata
from cartql.models.cart import Cart, CartItem

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    yield

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="1.0.0",
    lifespan=lifespan,
    description="GraphQL API for shopping carts and Stripe checkout"
)

@app.get("/")
def read_root():
    return {"message": "Welcome to CartQL. Send GraphQL requests to /graphql."}

from cartql.routers import cart

app.include_router(cart.router, prefix="/graphql", tags=["cart"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
