"""Fixed markup every AMP document carries verbatim."""
from typing import List

from bs4 import BeautifulSoup, Tag

from ..core import create_element

BOILERPLATE_CSS = "".join([
    "body{-webkit-animation:-amp-start 8s steps(1,end) 0s 1 normal both;",
    "-moz-animation:-amp-start 8s steps(1,end) 0s 1 normal both;",
    "-ms-animation:-amp-start 8s steps(1,end) 0s 1 normal both;",
    "animation:-amp-start 8s steps(1,end) 0s 1 normal both}",
    "@-webkit-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}",
    "@-moz-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}",
    "@-ms-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}",
    "@-o-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}",
    "@keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}",
])

BOILERPLATE_NOSCRIPT_CSS = "body{-webkit-animation:none;-moz-animation:none;-ms-animation:none;animation:none}"

AMP_RUNTIME_URL = "https://cdn.ampproject.org/v0.js"
AMP_ANALYTICS_URL = "https://cdn.ampproject.org/v0/amp-analytics-0.1.js"


def generate_boilerplate(factory: BeautifulSoup) -> Tag:
    return create_element(factory, "style", {"amp-boilerplate": ""}, BOILERPLATE_CSS)


def generate_boilerplate_for_noscript(factory: BeautifulSoup) -> Tag:
    noscript = create_element(factory, "noscript")
    noscript.append(create_element(factory, "style", {"amp-boilerplate": ""}, BOILERPLATE_NOSCRIPT_CSS))
    return noscript


def generate_custom_style(factory: BeautifulSoup, css: str) -> Tag:
    return create_element(factory, "style", {"amp-custom": ""}, css)


def generate_loader_scripts(factory: BeautifulSoup) -> List[Tag]:
    """The amp-analytics extension loader followed by the AMP runtime loader."""
    analytics = create_element(factory, "script", {
        "async": "",
        "custom-element": "amp-analytics",
        "src": AMP_ANALYTICS_URL,
    })
    runtime = create_element(factory, "script", {"async": "", "src": AMP_RUNTIME_URL})
    return [analytics, runtime]
