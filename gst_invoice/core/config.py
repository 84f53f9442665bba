# gst_invoice/core/config.py

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from the process + optionally from a local .env
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    # App
    APP_NAME: str = Field(default="gst_invoice", validation_alias=AliasChoices("APP_NAME", "app_name"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    # Seller (used when no business settings are supplied)
    BUSINESS_NAME: str = Field(default="Pearls by Mangatrai", validation_alias=AliasChoices("BUSINESS_NAME", "business_name"))
    BUSINESS_LEGAL_NAME: str = Field(
        default="Mangatrai Gems & Jewels Private Limited",
        validation_alias=AliasChoices("BUSINESS_LEGAL_NAME", "business_legal_name"),
    )
    BUSINESS_ADDRESS: str = Field(
        default="Opp. Liberty Petrol pump, Basheer Bagh",
        validation_alias=AliasChoices("BUSINESS_ADDRESS", "business_address"),
    )
    BUSINESS_CITY: str = Field(default="Hyderabad", validation_alias=AliasChoices("BUSINESS_CITY", "business_city"))
    BUSINESS_STATE: str = Field(default="Telangana", validation_alias=AliasChoices("BUSINESS_STATE", "business_state"))
    BUSINESS_PINCODE: str = Field(default="500063", validation_alias=AliasChoices("BUSINESS_PINCODE", "business_pincode"))
    BUSINESS_EMAIL: str = Field(
        default="sales@pearlsbymangatrai.com",
        validation_alias=AliasChoices("BUSINESS_EMAIL", "business_email"),
    )
    BUSINESS_PHONE: str = Field(default="+91 91000 09220", validation_alias=AliasChoices("BUSINESS_PHONE", "business_phone"))
    BUSINESS_GSTIN: str = Field(default="36AAPCM2955G1Z4", validation_alias=AliasChoices("BUSINESS_GSTIN", "business_gstin"))
    BUSINESS_CIN: str | None = Field(
        default="U36900TG2021PTC158093",
        validation_alias=AliasChoices("BUSINESS_CIN", "business_cin"),
    )
    BUSINESS_PAN: str | None = Field(default="AAPCM2955G", validation_alias=AliasChoices("BUSINESS_PAN", "business_pan"))

    # Invoice numbering
    INVOICE_PREFIX: str = Field(default="O-/", validation_alias=AliasChoices("INVOICE_PREFIX", "invoice_prefix"))
    INVOICE_STARTING_NUMBER: int = Field(
        default=3340,
        validation_alias=AliasChoices("INVOICE_STARTING_NUMBER", "invoice_starting_number"),
    )
    INVOICE_AUTO_INCREMENT: bool = Field(
        default=True,
        validation_alias=AliasChoices("INVOICE_AUTO_INCREMENT", "invoice_auto_increment"),
    )
    STARTING_ORDER_NUMBER: int | None = Field(
        default=None,
        validation_alias=AliasChoices("STARTING_ORDER_NUMBER", "starting_order_number"),
    )
    STARTING_INVOICE_NUMBER: int | None = Field(
        default=None,
        validation_alias=AliasChoices("STARTING_INVOICE_NUMBER", "starting_invoice_number"),
    )

    # Mapping defaults
    DEFAULT_HSN: str = Field(default="711319", validation_alias=AliasChoices("DEFAULT_HSN", "default_hsn"))
    DEFAULT_COUNTRY: str = Field(default="India", validation_alias=AliasChoices("DEFAULT_COUNTRY", "default_country"))
    DEFAULT_PAYMENT_METHOD: str = Field(
        default="Prepaid",
        validation_alias=AliasChoices("DEFAULT_PAYMENT_METHOD", "default_payment_method"),
    )


settings = Settings()
