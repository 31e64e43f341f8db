"""SKU and purchase invoice number generation."""

import random
import time


def _prefix(text: str | None) -> str:
    cleaned = "".join((text or "").split())
    return cleaned[:2].upper() if cleaned else "XX"


def generate_sku(
    name: str,
    category_name: str | None,
    product_type_name: str | None,
    rng: random.Random | None = None,
) -> str:
    """
    Build a SKU from name, category and type prefixes plus a random suffix.

    ``"Olive Oil", "Oils", "Raw"`` gives e.g. ``OLOIRA4821``. A missing
    category or type contributes ``XX``.
    """
    rng = rng or random
    suffix = rng.randint(1000, 9999)
    return f"{_prefix(name)}{_prefix(category_name)}{_prefix(product_type_name)}{suffix}"


def generate_invoice_number(rng: random.Random | None = None) -> str:
    """``INV-<last 6 digits of epoch ms>-<3 random digits>``."""
    rng = rng or random
    stamp = str(int(time.time() * 1000))[-6:]
    return f"INV-{stamp}-{rng.randint(0, 999):03d}"
