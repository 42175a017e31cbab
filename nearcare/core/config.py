from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    nominatim_url: str = Field("https://nominatim.openstreetmap.org")
    overpass_url: str = Field("https://overpass-api.de/api/interpreter")
    directory_url: str = Field("http://127.0.0.1:8000/api/health-centers")
    debug: bool = False
    timeout: int = 30

    # Local key-value store (allFacilities, userLocation)
    store_path: str = Field("nearcare_store.sqlite3")

    # Geolocation
    locator: str = Field("ip")  # ip | fixed | none
    ip_locator_url: str = Field("https://ipapi.co/json/")
    fixed_lat: float | None = None
    fixed_lng: float | None = None
    geolocation_timeout: float = 10.0
    geolocation_high_accuracy: bool = True
    geolocation_maximum_age: int = 0

    # Live search
    search_radius_m: int = Field(11000)
    overpass_query_timeout: int = 25
    enforce_search_radius: bool = True
    dedup_distance_m: float = 50.0

    nearest_limit: int = 10
    user_agent: str = Field("nearcare/0.1 (dev@example.com)")

    model_config = SettingsConfigDict(
        env_prefix="NEARCARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="allow",
    )


settings = Settings()
