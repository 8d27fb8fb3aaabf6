"""Service configuration, read from the environment and an optional .env file."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .entity import Category
from .env import get_env_int, get_env_string

logger = logging.getLogger(__name__)

COMPANY_NAME = "Школа танцев «Без правил»"

CATEGORIES = (
    Category(id=1, name="Танцевальные классы (разовое посещение)"),
    Category(id=2, name="Абонементы"),
)


@dataclass
class DBConfig:
    """Database connection settings."""

    host: str
    port: str
    user: str
    password: str
    db_name: str


@dataclass
class Config:
    """All settings of the feed service."""

    database: DBConfig
    first_visit_price: int = 300
    visit_price: int = 700
    port: str = "9999"
    yandex_path: str = "/yandex.yml"
    class_default_picture: str = "https://bezpravil.net/img/logo.png"
    class_default_link: str = "https://bezpravil.net"
    pass_default_picture: str = "https://bezpravil.net/img/logo.png"
    pass_default_link: str = "https://bezpravil.net"
    company_name: str = COMPANY_NAME
    categories: list[Category] = field(default_factory=lambda: list(CATEGORIES))


def _database_secret() -> str:
    """Return the database password from the environment, empty when unset."""
    return get_env_string("DB_PASSWORD", str())


def load_config(env_file=".env") -> Config:
    """Load ``env_file`` if present (existing variables win), then build a Config."""
    path = Path(env_file)
    if path.is_file():
        load_dotenv(path, override=False)
        logger.info("Загрузили конфиг из .env файла")
    else:
        logger.info(".env файл отсутствует: %s", path)

    password = _database_secret()
    database = DBConfig(
        host=get_env_string("DB_HOST", "localhost"),
        port=get_env_string("DB_PORT", "3306"),
        user=get_env_string("DB_USER", "root"),
        password=password,
        db_name=get_env_string("DB_NAME", "root"),
    )
    return Config(
        database=database,
        first_visit_price=get_env_int("FIRST_VISIT_PRICE", 300),
        visit_price=get_env_int("VISIT_PRICE", 700),
        port=get_env_string("PORT", "9999"),
        yandex_path=get_env_string("YANDEX_PATH", "/yandex.yml"),
        class_default_picture=get_env_string(
            "CLASS_DEFAULT_PICTURE", "https://bezpravil.net/img/logo.png"
        ),
        class_default_link=get_env_string("CLASS_DEFAULT_LINK", "https://bezpravil.net"),
        pass_default_picture=get_env_string(
            "PASS_DEFAULT_PICTURE", "https://bezpravil.net/img/logo.png"
        ),
        pass_default_link=get_env_string("PASS_DEFAULT_LINK", "https://bezpravil.net"),
    )