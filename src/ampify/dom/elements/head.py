import json
import math
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from ampify.errors import DataError
from ..core import create_element
from ..models import CanonicalLink, StructuredDataBlock

VIEWPORT = "initial-scale=1,minimum-scale=1,width=device-width"
STRUCTURED_DATA_TYPE = "application/ld+json"


def _reject_constant(name: str):
    raise ValueError(f"{name} is not a JSON value")


def _finite_float(text: str) -> float:
    value = float(text)
    if math.isinf(value):
        raise ValueError(f"number {text} is out of range")
    return value


# --- SOURCE EXTRACTION ---

def extract_canonical(document: BeautifulSoup) -> Optional[CanonicalLink]:
    """Returns the first rel="canonical" reference, or None when absent or empty."""
    canonical = document.select_one('[rel="canonical"]')
    href = canonical.get('href', '').strip() if canonical else ""
    return CanonicalLink(href=href) if href else None


def extract_title(document: BeautifulSoup) -> str:
    return document.title.get_text() if document.title else ""


def extract_structured_data(document: BeautifulSoup) -> List[StructuredDataBlock]:
    """
    Decodes every application/ld+json block of the document, in document order.

    Raises:
        DataError: a block is empty or not valid JSON.
    """
    blocks = []
    for index, script in enumerate(document.select(f'[type="{STRUCTURED_DATA_TYPE}"]')):
        try:
            data = json.loads(
                script.get_text(), parse_constant=_reject_constant, parse_float=_finite_float
            )
        except ValueError as e:
            raise DataError(f"Structured data block #{index + 1} is not valid JSON: {e}") from e
        blocks.append(StructuredDataBlock(data=data))
    return blocks


# --- OUTPUT ELEMENTS ---

def generate_charset(factory: BeautifulSoup) -> Tag:
    return create_element(factory, "meta", {"charset": "UTF-8"})


def generate_viewport(factory: BeautifulSoup) -> Tag:
    return create_element(factory, "meta", {"name": "viewport", "content": VIEWPORT})


def generate_canonical(factory: BeautifulSoup, canonical: Optional[CanonicalLink]) -> Optional[Tag]:
    if canonical is None:
        return None
    return create_element(factory, "link", {"href": canonical.href, "rel": "canonical"})


def generate_title(factory: BeautifulSoup, title: str) -> Tag:
    return create_element(factory, "title", text=title)


def generate_structured_data(factory: BeautifulSoup, block: StructuredDataBlock) -> Tag:
    return create_element(factory, "script", {"type": STRUCTURED_DATA_TYPE}, block.to_json())
