from __future__ import annotations

import logging
from typing import Callable

from pydantic import ValidationError

from tableside.application.dto.responses import CatalogResponse, MenuResponse
from tableside.application.mappers.menu_mapper import to_menu_category_response
from tableside.application.ports.cache import CacheStore
from tableside.application.ports.repositories import PersistenceError, UnitOfWork
from tableside.application.use_cases.session_manager import (
    DEFAULT_QR_BASE_URL,
    SessionManager,
    validate_table_number,
)

logger = logging.getLogger(__name__)

CATALOG_CACHE_KEY = "menu:catalog"
DEFAULT_IMAGE_BASE_URL = "/menu-images"


class GetMenu:
    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        cache: CacheStore,
        *,
        qr_base_url: str = DEFAULT_QR_BASE_URL,
        image_base_url: str = DEFAULT_IMAGE_BASE_URL,
        ttl_seconds: int = 300,
    ) -> None:
        self._uow_factory = uow_factory
        self._cache = cache
        self._qr_base_url = qr_base_url
        self._image_base_url = image_base_url
        self._ttl_seconds = ttl_seconds

    def _cache_get(self, key: str) -> str | None:
        try:
            return self._cache.get(key)
        except Exception:
            logger.warning("menu_cache_read_failed", exc_info=True)
            return None

    def _cache_set(self, key: str, value: str) -> None:
        try:
            self._cache.set(key, value, ttl_seconds=self._ttl_seconds)
        except Exception:
            logger.warning("menu_cache_write_failed", exc_info=True)

    def _cached_catalog(self) -> CatalogResponse | None:
        payload = self._cache_get(CATALOG_CACHE_KEY)
        if not payload:
            return None
        try:
            return CatalogResponse.model_validate_json(payload)
        except ValidationError:
            return None

    def execute(self, table_number: int) -> MenuResponse:
        number = validate_table_number(table_number)

        try:
            with self._uow_factory() as uow:
                sessions = SessionManager(uow, qr_base_url=self._qr_base_url)
                table = sessions.resolve_table(number)
                sessions.resolve_table_session(table)
                uow.commit()

                catalog = self._cached_catalog()
                if catalog is None:
                    categories = uow.menu.list_active_categories()
                    catalog = CatalogResponse(
                        categories=[
                            to_menu_category_response(category, self._image_base_url)
                            for category in categories
                        ]
                    )
                    self._cache_set(CATALOG_CACHE_KEY, catalog.model_dump_json())
        except PersistenceError:
            logger.exception("menu_load_failed", extra={"table_number": number})
            raise

        return MenuResponse(tableNumber=int(number), categories=catalog.categories)
