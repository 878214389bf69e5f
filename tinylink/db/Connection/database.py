import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from tinylink.core.config import settings
from tinylink.services.cache_store import RedisCacheStore
from redis.connection import ConnectionPool
import redis
from sqlalchemy import text

logger = logging.getLogger(__name__)

SQLALCHEMY_DATABASE_URL = settings.database_url
_connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(SQLALCHEMY_DATABASE_URL, pool_pre_ping=True, connect_args=_connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

pool = ConnectionPool(
    host=settings.REDIS_HOST,
    port=settings.REDIS_PORT,
    db=settings.REDIS_DB,
    decode_responses=True,
    max_connections=50,
    socket_connect_timeout=2,
    socket_keepalive=True,
    retry_on_timeout=True,
)

redis_client = redis.Redis(connection_pool=pool)
cache_store = RedisCacheStore(redis_client)


def get_cache():
    return cache_store


def verify_redis_connection():
    try:
        redis_client.ping()
        logger.info("Redis connection verified")
        return True
    except redis.exceptions.ConnectionError as e:
        logger.warning(f"Redis connection failed: {e}. Links cannot be created until it is back.")
        return False
    except redis.exceptions.RedisError as e:
        logger.error(f"Unexpected Redis error: {e}")
        return False


def verify_database_connection():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection verified")
        return True
    except Exception as e:
        logger.error(f"Database connection failed: {e}")
        return False
