from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PROJECT_NAME: str = "Property Manager"
    LOG_LEVEL: str = "INFO"

    # Durable storage
    STORAGE_BACKEND: str = "file"  # "file" or "memory"
    DATA_DIR: str = "data"
    PROPERTIES_KEY: str = "pm_properties"
    TENANTS_KEY: str = "pm_tenants"

    # Reject tenants whose propertyId does not resolve
    STRICT_TENANT_REFERENCES: bool = True

    # Lease uploads
    MAX_LEASE_BYTES: int = 5 * 1024 * 1024
    LEASE_EXTENSIONS: tuple = (".pdf", ".doc", ".docx")

    DASHBOARD_PROPERTY_LIMIT: int = 6

    class Config:
        case_sensitive = True

settings = Settings()
