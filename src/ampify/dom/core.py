from typing import Dict, Optional

from bs4 import BeautifulSoup, Tag


def create_element(
        factory: BeautifulSoup,
        name: str,
        attrs: Optional[Dict[str, str]] = None,
        text: Optional[str] = None,
) -> Tag:
    """
    Creates a detached element.

    Text is stored as-is; the HTML formatter leaves <script> and <style>
    content unescaped and escapes everything else.
    """
    tag = factory.new_tag(name, attrs=attrs or {})
    if text is not None:
        tag.string = text
    return tag


def shallow_copy(factory: BeautifulSoup, tag: Tag) -> Tag:
    """Copies an element's name and attributes without its children."""
    attrs = {name: list(value) if isinstance(value, list) else value for name, value in tag.attrs.items()}
    return factory.new_tag(tag.name, attrs=attrs)
