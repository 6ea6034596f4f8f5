from enum import Enum

# --- Константы Web Mercator и XYZ
# Максимальный уровень приближения (индексы тайлов должны помещаться в 32 бита)
MAX_ZOOM = 31

# Границы применимости проекции Mercator (у полюсов проекция расходится)
MERCATOR_LAT_LIMIT_DEG = 85.0511
WORLD_LNG_SPAN_DEG = 360.0
WORLD_LNG_HALF_SPAN_DEG = 180.0
WORLD_LAT_MAX_DEG = 90.0

# Базовый размер тайла Web Mercator (пикселей)
TILE_SIZE = 256

# Разрешение (м/пикс) на экваторе при zoom=0 для тайла 256 px
EQUATOR_RESOLUTION_M_PX = 156543.034

# --- Опции кэша тайлов
# Каталог кэша (относительные пути считаются от корня проекта)
TILE_CACHE_DIR = '.cache/tiles'
# Шаблон имени файла тайла внутри пространства имён сервера
TILE_FILENAME_TEMPLATE = 'x{x}_y{y}_z{z}.jpg'
TILE_FILENAME_GLOB = 'x*_y*_z*.jpg'

# --- Параметры сетевых запросов по умолчанию
HTTP_TIMEOUT_DEFAULT = 20.0
HTTP_USER_AGENT = 'tileloader/1.0 (+https://wiki.openstreetmap.org/wiki/Tile_usage_policy)'
HTTP_OK = 200
# Код, которым транспорт сообщает об ошибке соединения (ответа не было)
HTTP_NO_RESPONSE = 0

# --- Параметры загрузки по умолчанию
DEFAULT_ZOOM = 18
DEFAULT_BLOCKS = 1

# --- Журналирование
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_FILE_NAME = 'tileloader.log'

# Каталог профилей TOML
PROFILES_DIR = 'configs/profiles'


class TileSource(str, Enum):
    """Известные шаблоны серверов тайлов."""

    OSM = 'https://tile.openstreetmap.org/{z}/{x}/{y}.png'
    ESRI_WORLD_IMAGERY = (
        'https://server.arcgisonline.com/ArcGIS/rest/services/'
        'World_Imagery/MapServer/tile/{z}/{y}/{x}'
    )
    GOOGLE_SATELLITE = 'https://mt1.google.com/vt/lyrs=s&x={x}&y={y}&z={z}'


def default_tile_source() -> TileSource:
    return TileSource.ESRI_WORLD_IMAGERY
