from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jewel_ledger.api.v1.api import api_router
from jewel_ledger.core.config import settings
from jewel_ledger.core.exceptions import register_exception_handlers

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.DESCRIPTION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition", "X-Share-Url"],
)

register_exception_handlers(app)


@app.get("/")
def root():
    return {"message": "Welcome to Jewel Ledger API"}


app.include_router(api_router, prefix=settings.API_V1_STR)
