"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Builder settings."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "qti-builder"
    environment: str = "development"
    log_level: str = "INFO"

    qti_namespace: str = "http://www.imsglobal.org/xsd/imsqtiasi_v3p0"
    qti_schema_location: str = (
        "https://purl.imsglobal.org/spec/qti/v3p0/schema/xsd/imsqti_asiv3p0p1_v1p0.xsd"
    )
    response_template_url: str = (
        "https://purl.imsglobal.org/spec/qti/v3p0/rptemplates/match_correct.xml"
    )
    xml_lang: str = "en-US"

    parser_strict_mode: bool = False
    max_xml_bytes: int = Field(default=2 * 1024 * 1024, ge=1)
    download_filename_fallback: str = "question"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
