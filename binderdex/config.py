from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    debug: bool = False

    # Device-local storage, also used before sign-in
    device_database_url: str = "sqlite+aiosqlite:///./binderdex-device.db"

    # Per-account cloud storage. Empty string means no remote is configured
    # and every read/write goes to the device store.
    account_database_url: str = ""

    # Shared admin config documents (baselines, exclusions, custom cards)
    admin_database_url: str = ""
    admin_user_ids: list[str] = []
    admin_cache_ttl_seconds: float = 300.0

    catalog_api_url: str = "https://api.tcgdex.net/v2"
    species_api_url: str = "https://pokeapi.co/api/v2"
    http_timeout_seconds: float = 30.0

    # Language used to resolve printing ids when a localized search is empty
    reference_language: str = "en"

    # Number of species in the national roster
    species_limit: int = 1025


settings = Settings()


# =============================================================================
# VARIANT RULES
# =============================================================================

# Last group release date with a first-edition print run
LAST_FIRST_EDITION_RELEASE_DATE = "2003-12-31"

# Catalog groups that are listed upstream but have no printings
GROUP_IDS_WITHOUT_PRINTINGS = frozenset({"wp", "jumbo"})
