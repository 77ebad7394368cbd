"""The fixed set of sunsigns and where each one's forecast lives upstream."""

from typing import NamedTuple

from errors import UnknownTopicError


class Topic(NamedTuple):
    path: str
    date_range: str


TOPICS: dict[str, Topic] = {
    "aquarius": Topic("aquarius-weekly-horoscope/", "January 20 – February 18"),
    "libra": Topic("libra-weekly-horoscope/", "September 21 – October 22"),
    "sagittarius": Topic("sagittarius-weekly-horoscope/", "November 22 – December 22"),
    "capricorn": Topic("capricorn-weekly-horoscope/", "December 23 – January 19"),
    "scorpio": Topic("scorpio-weekly-horoscope/", "October 23 – November 21"),
    "pisces": Topic("pisces-weekly-horoscope/", "February 19 – March 19"),
    "virgo": Topic("virgo-weekly-horoscope/", "August 22 – September 20"),
    "leo": Topic("leo-weekly-horoscope/", "July 22 – August 21"),
    "cancer": Topic("cancer-weekly-horoscope/", "June 21 – July 21"),
    "gemini": Topic("gemini-weekly-horoscope/", "May 20 – June 20"),
    "taurus": Topic("taurus-weekly-horoscope/", "April 19 – May 19"),
    "aries": Topic("aries-weekly-horoscope/", "March 20 – April 18"),
}


def is_known(sign: str) -> bool:
    return sign in TOPICS


def sorted_signs() -> list[str]:
    return sorted(TOPICS)


def get_topic(sign: str) -> Topic:
    topic = TOPICS.get(sign)
    if topic is None:
        raise UnknownTopicError(sign, list(TOPICS))
    return topic


def source_url(sign: str, base_url: str) -> str:
    """Upstream page for a sign, e.g. ``<base>/aries-weekly-horoscope/``."""
    return base_url + get_topic(sign).path


def label(sign: str) -> str:
    """Readable name of the upstream page: 'aries weekly horoscope'."""
    return get_topic(sign).path.replace("/", "").replace("-", " ")
