"""Small display helpers shared by the commands."""

from __future__ import annotations

from datetime import datetime

REGION_LABELS: dict[str, str] = {
    "cn-bj1": "Beijing1",
    "cn-bj2": "Beijing2",
    "cn-sh2": "Shanghai2",
    "cn-gd": "Guangzhou",
    "hk": "Hongkong",
    "us-ca": "LosAngeles",
    "us-ws": "Washington",
    "ge-fra": "Frankfurt",
    "th-bkk": "Bangkok",
    "kr-seoul": "Seoul",
    "sg": "Singapore",
    "tw-kh": "Kaohsiung",
    "rus-mosc": "Moscow",
    "jpn-tky": "Tokyo",
    "tw-tp": "TaiPei",
    "uae-dubai": "Dubai",
    "idn-jakarta": "Jakarta",
    "ind-mumbai": "Bombay",
    "bra-saopaulo": "SaoPaulo",
    "uk-london": "London",
    "afr-nigeria": "Lagos",
}


def mosaic_string(s: str, begin_chars: int, last_chars: int) -> str:
    """Mask the middle of a secret, keeping its first and last characters.

    Strings too short to keep both ends are masked entirely.
    """
    hidden = len(s) - last_chars - begin_chars
    if hidden > 0:
        return s[:begin_chars] + "*" * hidden + s[hidden + begin_chars:]
    return "*" * len(s)


def format_date(seconds: int) -> str:
    """Format a Unix timestamp as ``YYYY-MM-DD`` in local time."""
    return datetime.fromtimestamp(seconds).strftime("%Y-%m-%d")


def pick_resource_id(value: str) -> str:
    """``uhost-xxx/uhost-name`` -> ``uhost-xxx``."""
    return value.split("/", 1)[0]


def region_label(region: str) -> str:
    return REGION_LABELS.get(region, region)
