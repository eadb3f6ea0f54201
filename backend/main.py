"""
HR Stats — FastAPI Backend
Serves statistic analysis, employee birthdays and reminder integrations
from the HR data store.

Run:  uvicorn main:app --reload   (from backend/)
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from db import LOG_LEVEL
from routers import dashboard, employees, integrations, statistics

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="HR Stats API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (statistics, dashboard, employees, integrations):
    app.include_router(module.router)


@app.get("/api/health")
def health():
    return {"ok": True}
