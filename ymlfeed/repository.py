"""Loading dance classes and passes from the school database as catalogue offers."""

import logging
import re
from collections.abc import Sequence
from datetime import timedelta

import pymysql

from .config import Config, DBConfig
from .entity import Offer
from .text import inflect, safely_truncate

logger = logging.getLogger(__name__)

CURRENCY = "RUR"
CLASS_CATEGORY_ID = 1
PASS_CATEGORY_ID = 2
MAX_TEXT_BYTES = 250

_WEEKDAYS = (
    "понедельникам",
    "вторникам",
    "средам",
    "четвергам",
    "пятницам",
    "субботам",
    "воскресеньям",
)

_LESSON_FORMS = ("урок", "урока", "уроков")
_DAY_FORMS = ("день", "дня", "дней")
_GUEST_FORMS = ("гостевое", "гостевых", "гостевых")
_FREEZE_NOTE = "C возможностью заморозки на месяц."

_TIME = re.compile(r"([0-9]{1,2}):([0-9]{2}):([0-9]{2})")

_CLASSES_QUERY = """
SELECT
    c.id,
    c.string AS name,
    c.description AS class_description,
    (
        SELECT st.description
        FROM styles_classes AS sc
        JOIN styles AS st ON st.id = sc.style_id
        WHERE sc.class_id = c.id
        ORDER BY sc.id DESC, st.id DESC
        LIMIT 1
    ) AS style_description,
    c.mon, c.tue, c.wed, c.thu, c.fri, c.sat, c.sun,
    s.studio_title,
    c.price_rate
FROM classes AS c
JOIN studios AS s ON c.studio_id = s.id
WHERE c.hidden IS NULL
    AND c.deleted IS NULL
    AND c.string IS NOT NULL
    AND (c.start_date IS NULL OR c.start_date <= NOW())
    AND (c.end_date IS NULL OR c.end_date >= NOW())
"""

_PASSES_QUERY = """
SELECT
    t.ticket_type_name AS name,
    t.description,
    t.default_price AS price,
    t.default_period AS lifetime,
    CAST(t.default_periods / 2 AS UNSIGNED) AS hours,
    t.default_frosts AS freeze_allowed,
    t.default_guests AS guest_visits
FROM ticket_types AS t
WHERE t.ticket_type_active = 1 AND t.description IS NOT NULL
ORDER BY t.default_price ASC
"""


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _time_text(value) -> str:
    if isinstance(value, timedelta):
        total = int(value.total_seconds())
        sign = "-" if total < 0 else ""
        hours, rest = divmod(abs(total), 3600)
        minutes, seconds = divmod(rest, 60)
        return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _clock(value) -> str | None:
    """Turn a stored class time into "HH:MM", or None if it does not parse.

    The value is read as hour:minute:minute, so the last field sets the minutes.
    """
    match = _TIME.fullmatch(_time_text(value))
    if match is None:
        return None
    hour, first_minute, last_minute = (int(part) for part in match.groups())
    if hour >= 24 or first_minute >= 60 or last_minute >= 60:
        return None
    return f"{hour:02d}:{last_minute:02d}"


def build_schedule(times: Sequence) -> str:
    """Describe weekly class times, Monday first; ``None`` marks a day without a class."""
    if len(times) != len(_WEEKDAYS):
        raise ValueError(f"expected {len(_WEEKDAYS)} weekday times, got {len(times)}")

    days_by_time: dict[str, list[str]] = {}
    for day, value in zip(_WEEKDAYS, times):
        if value is None:
            continue
        clock = _clock(value)
        if clock is not None:
            days_by_time.setdefault(clock, []).append(day)

    parts = []
    for clock, days in days_by_time.items():
        if len(days) > 1:
            listed = ", ".join(days[:-1]) + " и " + days[-1]
        else:
            listed = days[0]
        parts.append(f"По {listed} в {clock}")
    return "; ".join(parts)


def _short_description(full: str, fallback: str) -> str:
    if _byte_length(full) > MAX_TEXT_BYTES:
        return safely_truncate(fallback, MAX_TEXT_BYTES)
    return full


def class_offer(row: Sequence, config: Config) -> Offer:
    """Build an offer from a row of the classes query."""
    if len(row) != 13:
        raise ValueError(f"class row must have 13 columns, got {len(row)}")
    offer_id, name, class_desc, style_desc, *days, studio, price = row
    if name is None:
        raise ValueError("class name is NULL")

    name = str(name)
    if studio is not None:
        name += " в студии " + str(studio)

    schedule = build_schedule(days)
    if class_desc:
        description = f"{class_desc}\n"
    elif style_desc:
        description = f"{style_desc}\n"
    else:
        description = ""
    full_description = description + schedule

    return Offer(
        id=int(offer_id),
        vendor=config.company_name,
        price=int(price) if price is not None else config.visit_price,
        currency_id=CURRENCY,
        category_id=CLASS_CATEGORY_ID,
        picture=config.class_default_picture,
        url=config.class_default_link,
        name=safely_truncate(name, MAX_TEXT_BYTES),
        description=full_description,
        short_description=_short_description(full_description, schedule),
    )


def pass_offer(row: Sequence, offer_id: int, config: Config) -> Offer | None:
    """Build an offer from a row of the passes query, or None if the row is incomplete."""
    if len(row) != 7:
        raise ValueError(f"pass row must have 7 columns, got {len(row)}")
    name, desc, price, lifetime, hours, freeze_allowed, guest_visits = row
    if name is None:
        raise ValueError("pass name is NULL")
    if price is None or desc is None or lifetime is None or hours is None:
        return None

    desc = str(desc)
    hours = int(hours)
    lifetime = int(lifetime)

    freeze = _FREEZE_NOTE if freeze_allowed is not None and int(freeze_allowed) > 0 else ""

    guests = ""
    if guest_visits is not None and int(guest_visits) > 0:
        guests = f" + {inflect(int(guest_visits), _GUEST_FORMS)} для друзей"

    lessons = f"Включено {inflect(hours, _LESSON_FORMS)}{guests}. " if hours > 0 else ""
    duration = f" на {inflect(lifetime, _DAY_FORMS)}. " if lifetime > 0 else ""

    full_description = desc + duration + lessons + freeze

    return Offer(
        id=offer_id,
        vendor=config.company_name,
        price=int(price),
        currency_id=CURRENCY,
        category_id=PASS_CATEGORY_ID,
        picture=config.pass_default_picture,
        url=config.pass_default_link,
        name=safely_truncate(str(name), MAX_TEXT_BYTES),
        description=full_description,
        short_description=_short_description(full_description, desc),
    )


class Repository:
    """Reads offers through a DB-API connection."""

    def __init__(self, connection, config: Config):
        self._connection = connection
        self._config = config

    def _rows(self, query: str) -> list:
        with self._connection.cursor() as cursor:
            cursor.execute(query)
            return list(cursor.fetchall())

    def fetch_classes(self) -> list[Offer]:
        """Return the currently scheduled classes."""
        return [class_offer(row, self._config) for row in self._rows(_CLASSES_QUERY)]

    def _single_visits(self) -> list[Offer]:
        config = self._config
        common = dict(
            vendor=config.company_name,
            currency_id=CURRENCY,
            category_id=PASS_CATEGORY_ID,
            picture=config.pass_default_picture,
            url=config.pass_default_link,
        )
        return [
            Offer(
                id=1,
                name="Первое пробное занятие",
                description="Первый урок в любом классе",
                price=config.first_visit_price,
                **common,
            ),
            Offer(
                id=2,
                name="Разовое занятие",
                description="Одно часовое посещение в любом классе",
                price=config.visit_price,
                **common,
            ),
        ]

    def fetch_passes(self) -> list[Offer]:
        """Return the single-visit offers followed by the active passes."""
        offers = self._single_visits()
        for offer_id, row in enumerate(self._rows(_PASSES_QUERY), start=4):
            offer = pass_offer(row, offer_id, self._config)
            if offer is not None:
                offers.append(offer)
        return offers


def connect(db_config: DBConfig):
    """Open and check a MySQL connection."""
    connection = pymysql.connect(
        host=db_config.host,
        port=int(db_config.port),
        user=db_config.user,
        password=db_config.password,
        database=db_config.db_name,
        charset="utf8mb4",
    )
    try:
        connection.ping()
    except Exception:
        connection.close()
        raise
    logger.info("Подключились к БД")
    return connection