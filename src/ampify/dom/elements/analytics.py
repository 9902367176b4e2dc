from bs4 import BeautifulSoup, Tag

from ..core import create_element
from ..models import AnalyticsConfig


def generate_analytics(factory: BeautifulSoup, config: AnalyticsConfig, vendor: str = "googleanalytics") -> Tag:
    """
    Builds the page-view instrumentation:
    <amp-analytics type="..."><script type="application/json">{...}</script></amp-analytics>
    """
    element = create_element(factory, "amp-analytics", {"type": vendor})
    element.append(create_element(factory, "script", {"type": "application/json"}, config.to_json()))
    return element
