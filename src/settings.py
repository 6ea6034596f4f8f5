from __future__ import annotations

import logging
from pathlib import Path

import tomlkit
from pydantic import BaseModel, field_validator

from domain.toml_sections import flat_to_sectioned, sectioned_to_flat
from shared.constants import (
    DEFAULT_BLOCKS,
    DEFAULT_ZOOM,
    HTTP_TIMEOUT_DEFAULT,
    HTTP_USER_AGENT,
    MAX_ZOOM,
    MERCATOR_LAT_LIMIT_DEG,
    WORLD_LNG_HALF_SPAN_DEG,
    default_tile_source,
)

logger = logging.getLogger(__name__)


class LoaderSettings(BaseModel):
    """Параметры загрузки тайлов, читаемые из профиля TOML и командной строки."""

    model_config = {
        'extra': 'ignore',  # игнорировать лишние поля из профилей
    }

    # Шаблон URL сервера тайлов с {x}, {y}, {z}
    service: str = default_tile_source().value
    # Исходная точка (WGS84, градусы); обязательна для загрузки
    latitude: float | None = None
    longitude: float | None = None
    zoom: int = DEFAULT_ZOOM
    # Число колец тайлов вокруг центрального
    blocks: int = DEFAULT_BLOCKS
    # Каталог кэша (None: каталог по умолчанию)
    cache_dir: str | None = None
    # Таймаут HTTP-запроса (с)
    http_timeout_s: float = HTTP_TIMEOUT_DEFAULT
    user_agent: str = HTTP_USER_AGENT

    @field_validator('service')
    @classmethod
    def validate_service(cls, v):
        v = str(v).strip()
        if not v:
            msg = 'service must not be empty'
            raise ValueError(msg)
        return v

    @field_validator('latitude')
    @classmethod
    def validate_latitude(cls, v):
        if v is None:
            return v
        v = float(v)
        if not (-MERCATOR_LAT_LIMIT_DEG <= v <= MERCATOR_LAT_LIMIT_DEG):
            msg = f'latitude must be in [-{MERCATOR_LAT_LIMIT_DEG}, {MERCATOR_LAT_LIMIT_DEG}]'
            raise ValueError(msg)
        return v

    @field_validator('longitude')
    @classmethod
    def validate_longitude(cls, v):
        if v is None:
            return v
        v = float(v)
        if not (-WORLD_LNG_HALF_SPAN_DEG <= v <= WORLD_LNG_HALF_SPAN_DEG):
            msg = 'longitude must be in [-180, 180]'
            raise ValueError(msg)
        return v

    @field_validator('zoom')
    @classmethod
    def validate_zoom(cls, v):
        v = int(v)
        if not (0 <= v <= MAX_ZOOM):
            msg = f'zoom must be in [0, {MAX_ZOOM}]'
            raise ValueError(msg)
        return v

    @field_validator('blocks')
    @classmethod
    def validate_blocks(cls, v):
        v = int(v)
        if v < 0:
            msg = 'blocks must not be negative'
            raise ValueError(msg)
        return v

    @field_validator('http_timeout_s')
    @classmethod
    def validate_timeout(cls, v):
        v = float(v)
        if v <= 0:
            msg = 'http_timeout_s must be positive'
            raise ValueError(msg)
        return v

    @property
    def has_origin(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def load_settings(path: str | Path) -> LoaderSettings:
    """
    Загрузка и валидация профиля TOML -> LoaderSettings.

    Поддерживаются как плоские ключи, так и секции [origin], [http], [cache].
    """
    path = Path(path)
    if not path.exists():
        msg = f'Profile not found: {path}'
        raise FileNotFoundError(msg)
    data = tomlkit.parse(path.read_text(encoding='utf-8')).unwrap()
    settings = LoaderSettings.model_validate(sectioned_to_flat(data))
    logger.info('Loaded profile %s', path)
    return settings


def save_settings(settings: LoaderSettings, path: str | Path) -> Path:
    """Сохраняет LoaderSettings в TOML с секциями."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    doc = tomlkit.document()
    for section, values in flat_to_sectioned(settings.model_dump()).items():
        if not values:
            continue
        table = tomlkit.table()
        for key, value in values.items():
            table.add(key, value)
        doc.add(section, table)
    path.write_text(tomlkit.dumps(doc), encoding='utf-8')
    return path
