"""Pull the forecast title and body out of a 4to40 horoscope page.

The page carries the week's heading in the first ``<h4>`` and the forecast
text in the first paragraph of a ``<blockquote>``. Both are returned as inner
HTML so inline markup (bold, links) survives.
"""

import html
from typing import Protocol

import lxml.html
from lxml import etree

from services.models import Forecast

TITLE_XPATH = "(//h4)[1]"
BODY_XPATH = "(//blockquote//p)[1]"

# Literal absence markers the source sometimes renders in place of a title
NULL_PLACEHOLDERS = ("<nil>", "&lt;nil&gt;")


class DocumentParseError(Exception):
    """The raw document could not be parsed into a tree at all."""


class ContentExtractor(Protocol):
    def extract(self, raw: bytes) -> Forecast: ...


def _inner_html(element) -> str:
    parts = [html.escape(element.text or "", quote=False)]
    for child in element:
        parts.append(lxml.html.tostring(child, encoding="unicode"))
    return "".join(parts)


def _first(doc, xpath: str) -> str | None:
    found = doc.xpath(xpath)
    if not found:
        return None
    return _inner_html(found[0]).strip()


def _strip_placeholders(text: str) -> str:
    for marker in NULL_PLACEHOLDERS:
        text = text.replace(marker, "")
    return text.strip()


class HoroscopeExtractor:
    def extract(self, raw: bytes) -> Forecast:
        try:
            doc = lxml.html.document_fromstring(raw)
        except (etree.LxmlError, ValueError) as e:
            raise DocumentParseError(str(e)) from e

        title = _first(doc, TITLE_XPATH)
        if title is not None:
            title = _strip_placeholders(title)

        return Forecast(title=title, body=_first(doc, BODY_XPATH))
