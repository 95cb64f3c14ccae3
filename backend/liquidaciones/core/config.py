"""
Configuración central de la aplicación de liquidaciones.
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Configuración de la aplicación.
    Los valores se cargan desde variables de entorno o un archivo .env.
    """
    # Application
    APP_NAME: str = "Liquidaciones de Alquileres"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Logging
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = "*"

    # Reglas de negocio
    DEFAULT_CURRENCY: str = "ARS"
    DEFAULT_IVA_RATE_PERCENT: float = 21.0
    ALLOW_NEGATIVE_AMOUNTS: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
