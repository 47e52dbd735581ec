"""
Download file naming.

Pure functions deriving the name a processed file is offered under:
``processed_<base><tags>.<ext>``, with one tag per active option in a
fixed order.

Dependencies: None
System role: Deterministic download naming
"""

import re
from typing import Any, Mapping

PROCESSED_PREFIX = "processed_"

_CODE_SEPARATORS = re.compile(r"[\s,;]+")


def _dtc_tag(options: Mapping[str, Any]) -> str:
    codes = [code for code in _CODE_SEPARATORS.split(str(options.get("dtc_codes") or "")) if code]
    if not codes:
        return "(DTC_OFF)"
    return f"(DTC_P{'_'.join(codes)}_OFF)"


# Canonical tag order: (option flag, tag builder)
_TAGS = (
    ("dpf_off", lambda options: "(DPF_OFF)"),
    ("egr_off", lambda options: "(EGR_OFF)"),
    ("adblue_off", lambda options: "(ADBLUE_OFF)"),
    ("dtc_off", _dtc_tag),
    ("immo_off", lambda options: "(IMMO_OFF)"),
)


def option_tags(options: Mapping[str, Any]) -> list[str]:
    """Tags for the active boolean options, in canonical order."""
    return [build(options) for flag, build in _TAGS if options.get(flag)]


def derive_download_name(
    original_filename: str,
    options: Mapping[str, Any],
    prefix: str = PROCESSED_PREFIX,
) -> str:
    """
    Build the display name of a processed file.

    Tags are inserted before the last extension; a name without an
    extension gets them appended.

    Args:
        original_filename: Name the requester uploaded
        options: Job options (dpf_off, egr_off, adblue_off, dtc_off, dtc_codes, immo_off)
        prefix: Prepended to the base name

    Returns:
        str: Derived name, e.g. ``processed_map(DPF_OFF).bin``

    Example:
        >>> derive_download_name("map.bin", {"dpf_off": True, "egr_off": False})
        'processed_map(DPF_OFF).bin'
    """
    suffix = "".join(option_tags(options))
    base, dot, ext = original_filename.rpartition(".")
    if not dot or not base:
        return f"{prefix}{original_filename}{suffix}"
    return f"{prefix}{base}{suffix}.{ext}"
