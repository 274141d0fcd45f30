from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    pipeline_version: str = "1.0.0"
    fallback_pipeline_version: str = "fallback-1.0"
    thresholds_path: str = ""
    audit_log_path: str = ""
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "CITYINSIGHT_"
