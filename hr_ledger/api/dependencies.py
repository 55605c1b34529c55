"""
FastAPI dependencies for objects built at startup.

create_app() stores the settings and the chosen poster on
app.state; endpoints reach them through these functions so
tests can override them like get_db.
"""

from fastapi import Request

from hr_ledger.config import Settings
from hr_ledger.services.posting import TransactionPoster


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_poster(request: Request) -> TransactionPoster:
    return request.app.state.poster
