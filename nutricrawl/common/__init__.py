# Common utilities
from .config_loader import (
    get_brands_lowercase_map,
    get_enabled_sources,
    load_config,
    load_crawl_settings,
    load_known_brands,
    load_source_settings,
)
from .csv_utils import write_csv
from .errors import (
    ConfigurationError,
    CrawlError,
    FetchError,
    IdentifierNotFound,
    IncompleteProfile,
    NutrientBlockNotFound,
    ParseError,
)
from .http_client import FetchResult, HttpClient
from .log_config import setup_logging
from .text_utils import clean_text, is_numeric_identifier, parse_decimal, strip_tags
