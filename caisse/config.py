"""Runtime configuration defaults for the register, logging and printing."""

from __future__ import annotations

import os

from caisse.models import RemovalPolicy

SHOP_NAME = "Autobus Café"
CURRENCY_SYMBOL = "€"

REMOVAL_POLICY_ENV = "CAISSE_REMOVAL_POLICY"
DEFAULT_REMOVAL_POLICY = RemovalPolicy.CANCEL

DEBUG_LOG_PATH_ENV = "CAISSE_DEBUG_LOG_PATH"
DEBUG_LOG_PATH = "/tmp/caisse-debug.log"

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 28
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_FONT_PATH_ENV = "CAISSE_PRINTER_FONT_PATH"
PRINTER_LEFT_INDENT_PX = 16
PRINTER_TAIL_SPACER_PX = 70


def removal_policy() -> RemovalPolicy:
    """Resolve the transaction removal policy, ``cancel`` unless overridden."""
    raw = os.environ.get(REMOVAL_POLICY_ENV, "").strip().lower()
    if not raw:
        return DEFAULT_REMOVAL_POLICY
    try:
        return RemovalPolicy(raw)
    except ValueError:
        allowed = ", ".join(policy.value for policy in RemovalPolicy)
        raise ValueError(f"{REMOVAL_POLICY_ENV} must be one of: {allowed} (got {raw!r})") from None


def debug_log_path() -> str:
    return os.environ.get(DEBUG_LOG_PATH_ENV, "").strip() or DEBUG_LOG_PATH
