"""
Detección sencilla de navegador y tipo de dispositivo a partir del
User-Agent, para los registros de inicio de sesión.
"""
import re
from typing import Tuple

_TABLET = re.compile(r"ipad|tablet|playbook|silk|(android(?!.*mobile))", re.IGNORECASE)
_MOBILE = re.compile(r"mobi|iphone|ipod|android.*mobile|windows phone|blackberry", re.IGNORECASE)

# El orden importa: Edge y Opera incluyen "Chrome" en su User-Agent
_BROWSERS: Tuple[Tuple[str, re.Pattern], ...] = (
    ("Edge", re.compile(r"edg(e|a|ios)?/", re.IGNORECASE)),
    ("Opera", re.compile(r"opr/|opera", re.IGNORECASE)),
    ("Samsung Internet", re.compile(r"samsungbrowser", re.IGNORECASE)),
    ("Firefox", re.compile(r"firefox|fxios", re.IGNORECASE)),
    ("Chrome", re.compile(r"chrome|crios", re.IGNORECASE)),
    ("Safari", re.compile(r"safari", re.IGNORECASE)),
)


def detect_device_type(user_agent: str) -> str:
    if not user_agent:
        return "desktop"
    if _TABLET.search(user_agent):
        return "tablet"
    if _MOBILE.search(user_agent):
        return "mobile"
    return "desktop"


def detect_browser(user_agent: str) -> str:
    for name, pattern in _BROWSERS:
        if user_agent and pattern.search(user_agent):
            return name
    return "Unknown"
