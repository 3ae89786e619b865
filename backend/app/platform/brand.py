"""Centralized brand configuration for user-facing copy."""

BRAND_NAME = "SIMPLE"
BRAND_DOMAIN = "ciberseguridadsimple.com"
BRAND_PRODUCT_NAME = "Ciberseguridad Simple"
BRAND_APP_DESCRIPTION = "Cybersecurity maturity evaluations and awareness platform"


def brand_email_from() -> str:
    return f"{BRAND_PRODUCT_NAME} <info@{BRAND_DOMAIN}>"
