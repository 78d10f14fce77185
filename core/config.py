from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    PORT: int = 9000
    DEV: bool = False
    LOG_LEVEL: str = "INFO"
    METRIC_KEY_PREFIX: str = "disk"
    IGNORE_VIRTUAL: bool = True
    DISKSTATS_PATH: str = "/proc/diskstats"
    SYS_BLOCK_PATH: str = "/sys/block"

settings = Settings()
