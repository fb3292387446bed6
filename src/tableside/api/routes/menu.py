from __future__ import annotations

from fastapi import APIRouter, Query

from tableside.application.dto.responses import MenuResponse
from tableside.application.use_cases.get_menu import GetMenu
from tableside.infrastructure import config
from tableside.infrastructure.cache.cache_store import RedisCacheStore
from tableside.infrastructure.db.repositories.unit_of_work import SqlAlchemyUnitOfWork

router = APIRouter()


def _get_menu_use_case() -> GetMenu:
    return GetMenu(
        uow_factory=SqlAlchemyUnitOfWork,
        cache=RedisCacheStore(),
        qr_base_url=config.qr_base_url(),
        image_base_url=config.menu_image_base_url(),
        ttl_seconds=config.menu_cache_ttl_seconds(),
    )


@router.get("/v1/menu", response_model=MenuResponse)
def get_menu(table: int = Query(...)) -> MenuResponse:
    return _get_menu_use_case().execute(table)
