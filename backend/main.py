import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api import info_router, orders_router
from config import settings

logger = logging.getLogger("checkout")

app = FastAPI(title="Checkout API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(info_router)
app.include_router(orders_router)


@app.middleware("http")
async def log_preflight(request: Request, call_next):
    if request.method == "OPTIONS":
        logger.info(
            "Checkout preflight path=%s origin=%s",
            request.url.path,
            request.headers.get("origin", "-"),
        )
    return await call_next(request)
