from pathlib import Path
from typing import List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Play Arena'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Security (tokens are issued by the authentication service)
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'
    AUTH_COOKIE_NAME: str = 'auth_token'
    TOKEN_BLACKLIST_PREFIX: str = 'blacklist:'

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = ['http://localhost:5173']

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',')]
        elif isinstance(v, list):
            return v
        return []

    # PostgreSQL (authoritative booking + score store)
    POSTGRES_SERVER: str = 'localhost'
    POSTGRES_USER: str = 'postgres'
    POSTGRES_PASSWORD: SecretStr = SecretStr('postgres')
    POSTGRES_DB: str = 'play_arena'
    POSTGRES_PORT: int = 5432

    @property
    def DATABASE_URL_ASYNC(self) -> str:
        password = self.POSTGRES_PASSWORD.get_secret_value()
        return f'postgresql+asyncpg://{self.POSTGRES_USER}:{password}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}'

    # asyncpg pool
    ASYNCPG_POOL_MIN_SIZE: int = 5
    ASYNCPG_POOL_MAX_SIZE: int = 20
    ASYNCPG_POOL_COMMAND_TIMEOUT: float = 10.0
    ASYNCPG_POOL_MAX_INACTIVE_LIFETIME: float = 300.0
    ASYNCPG_POOL_TIMEOUT: float = 10.0
    ASYNCPG_POOL_MAX_QUERIES: int = 50000

    # Kvrocks Configuration (Redis protocol + Kvrocks storage)
    KVROCKS_HOST: str = 'localhost'
    KVROCKS_PORT: int = 6666
    KVROCKS_DB: int = 0
    KVROCKS_PASSWORD: str = ''
    KVROCKS_KEY_PREFIX: str = ''
    REDIS_DECODE_RESPONSES: bool = True  # Kvrocks 也用 Redis 協議

    # Kvrocks Connection Pool Configuration
    KVROCKS_POOL_MAX_CONNECTIONS: int = 100
    KVROCKS_POOL_SOCKET_TIMEOUT: int = 5
    KVROCKS_POOL_SOCKET_CONNECT_TIMEOUT: int = 5
    KVROCKS_POOL_SOCKET_KEEPALIVE: bool = True
    KVROCKS_POOL_HEALTH_CHECK_INTERVAL: int = 30

    # Kafka (notification channel)
    KAFKA_BOOTSTRAP_SERVERS: str = 'localhost:9092'
    KAFKA_ACKS: str = 'all'
    KAFKA_RETRIES: int = 3
    KAFKA_LINGER_MS: int = 10
    KAFKA_COMPRESSION_TYPE: str = 'snappy'
    NOTIFICATION_TOPIC: str = 'send_notification'

    # Play arena
    ARENA_TIMEZONE: str = 'UTC'
    SLOT_GRID_START: str = '09:00'
    SLOT_GRID_END: str = '22:00'
    SLOT_STEP_MINUTES: int = 30
    MAX_PARTICIPANTS: int = 4
    MAX_LOCATION_LENGTH: int = 100
    # Must stay within the INTEGER column range of score_entry.final_score
    MAX_FINAL_SCORE: int = 10_000
    AVAILABILITY_CACHE_TTL_SECONDS: int = 3600
    SLOT_LEASE_TTL_SECONDS: int = 120
    BOOKING_LEASE_TTL_SECONDS: int = 5
    ROSTER_CACHE_KEY: str = 'all_authusers'

    @property
    def KAFKA_PRODUCER_CONFIG(self) -> dict:
        return {
            'bootstrap.servers': self.KAFKA_BOOTSTRAP_SERVERS,
            'enable.idempotence': True,
            'acks': self.KAFKA_ACKS,
            'retries': self.KAFKA_RETRIES,
            'linger.ms': self.KAFKA_LINGER_MS,
            'compression.type': self.KAFKA_COMPRESSION_TYPE,
        }


settings = Settings()  # type: ignore
