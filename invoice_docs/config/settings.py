from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from container + optionally from file
    model_config = SettingsConfigDict(
        env_file=(".env",),
        extra="ignore",
        case_sensitive=False,
    )

    # App
    ENVIRONMENT: str = Field(default="dev", validation_alias=AliasChoices("ENVIRONMENT", "environment"))
    APP_NAME: str = Field(default="invoice_docs", validation_alias=AliasChoices("APP_NAME", "app_name"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    DEBUG: bool = Field(default=False, validation_alias=AliasChoices("DEBUG", "debug"))

    # Documents
    # Core PDF fonts have no rupee glyph, so the symbol defaults to "Rs."
    CURRENCY_SYMBOL: str = Field(default="Rs.", validation_alias=AliasChoices("CURRENCY_SYMBOL", "currency_symbol"))
    DOCUMENT_OUTPUT_DIR: str = Field(
        default="generated",
        validation_alias=AliasChoices("DOCUMENT_OUTPUT_DIR", "document_output_dir"),
    )
    PDF_AUTHOR: str = Field(default="", validation_alias=AliasChoices("PDF_AUTHOR", "pdf_author"))


settings = Settings()
