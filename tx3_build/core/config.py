from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="TX3_", extra="ignore")

    bindgen_path: str = "tx3-bindgen"
    output_dir: str = "node_modules/.tx3"
    trp_endpoint: str = "http://localhost:3000"
    target: str = "typescript"
    alias: str = "@tx3"

    log_level: str = "INFO"

settings = Settings()
