from fastapi import Request

from ..models import Settings
from ..pipeline.storage import TrendStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> TrendStore:
    return request.app.state.store
