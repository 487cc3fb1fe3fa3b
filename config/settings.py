from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Network profile from config/networks.py
    NETWORK: str = "hardhat"

    # Deployer account (hardhat account #0); becomes governance and upgrade owner
    DEPLOYER_ADDRESS: str = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

    # App
    APP_NAME: str = "Reserve Marketplace"
    DEBUG: bool = False  # Safe default for production; set DEBUG=True in .env for local dev
    LOG_LEVEL: str = "INFO"


settings = Settings()
