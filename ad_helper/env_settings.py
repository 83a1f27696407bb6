from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    ldap_path: str = Field(..., alias="AD_LDAP_PATH")
    username: str = Field("", alias="AD_USERNAME")
    password: str = Field("", alias="AD_PASSWORD")
    port: int = Field(0, alias="AD_PORT")
    # READONLY_SERVER | SEALING | SIGNING | SECURE
    auth_types: int = Field(197, alias="AD_AUTH_TYPES")
    tls_validate: bool = Field(False, alias="AD_TLS_VALIDATE")

    # Optional DNS server for resolving computer host names.
    dns_server: str = Field("", alias="AD_DNS_SERVER")

    worker_threads: int = Field(8, alias="AD_WORKER_THREADS")
    log_level: str = Field("INFO", alias="AD_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", populate_by_name=True, extra="ignore")


@lru_cache(maxsize=1)
def get_env() -> EnvSettings:
    return EnvSettings()
