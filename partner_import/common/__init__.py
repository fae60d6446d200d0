# Common utilities
from .config_loader import (
    get_blacklist_lowercase,
    load_category_keywords,
    load_config,
    load_importer_settings,
    load_partner_sites,
)
from .log_config import setup_logging
from .text_utils import absolute_url, clean_text, generate_slug, name_key
