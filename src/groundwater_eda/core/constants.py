"""
Application-wide constants for the groundwater EDA pipeline.

Backend table layout, cache namespaces and expiry policies live here.
"""

# Pagination
DEFAULT_PAGE_SIZE = 1000

# Region filter sentinel meaning "every aquifer system"
ALL_REGIONS = "todos"

# Backend column names
REGION_FIELD = "sistema_aquifero"
DATE_FIELD = "data"
X_FIELD = "coord_x_m"
Y_FIELD = "coord_y_m"

# Variables and the tables/code columns backing them
METEO_VARIABLE = "meteo"
METEO_TABLE = "temp_eobs_2014_24"
METEO_LAT_FIELD = "lat"
METEO_LON_FIELD = "long"
METEO_TIME_FIELD = "Time"

VARIABLE_TABLES = {
    "profundidade": ("piezo_tejo_loc_zvt", "codigo"),
    "nitrato": ("nitrato_tejo_loc_zvt", "codigo"),
    "condutividade": ("condut_tejo_loc_zvt", "codigo"),
    "caudal": ("caudal_tejo_loc", "localizacao"),
}

# Schema overview view exposed by the backend
TABLE_COLUMNS_VIEW = "table_columns"

# Cache layout
CACHE_STORAGE_PREFIX = "eda_cache:"
POINTS_NAMESPACE = "var_points_v1"
REGIONS_NAMESPACE = "sistemas_v1"
METEO_POINTS_KEY = "meteo_points_v1"

HOUR_MS = 60 * 60 * 1000
DAY_MS = 24 * HOUR_MS
POINTS_MAX_AGE_MS = DAY_MS
REGIONS_MAX_AGE_MS = 7 * DAY_MS

# Persistent cache capacity, similar to a browser storage quota
DEFAULT_CACHE_MAX_BYTES = 5 * 1024 * 1024

# Legacy Portuguese national grid (ESRI:102164), metres
LEGACY_GRID_CRS = (
    "+proj=tmerc +lat_0=39.66666666666666 +lon_0=-8.131906111111112 +k=1 "
    "+x_0=200000 +y_0=300000 +ellps=intl +units=m +no_defs"
)
GEOGRAPHIC_CRS = "EPSG:4326"

# Coordinates above this magnitude are treated as projected metres
PROJECTED_MAGNITUDE_THRESHOLD = 1000

DEFAULT_TIMEZONE = "Europe/Lisbon"
