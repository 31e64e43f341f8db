"""Tests for SKU and invoice number generation."""

import random
import re

from stockledger.core.services.numbering import generate_invoice_number, generate_sku


class TestGenerateSku:
    def test_prefixes_and_suffix(self):
        sku = generate_sku("Olive Oil", "Oils", "Raw", random.Random(7))
        assert sku.startswith("OLOIRA")
        assert re.fullmatch(r"OLOIRA\d{4}", sku)

    def test_whitespace_is_ignored(self):
        sku = generate_sku(" a b ", "c d", "e", random.Random(1))
        assert re.fullmatch(r"ABCDE\d{4}", sku)

    def test_missing_category_and_type(self):
        sku = generate_sku("Tea", None, "", random.Random(1))
        assert sku[:6] == "TEXXXX"

    def test_seeded_rng_is_deterministic(self):
        assert generate_sku("Tea", "Drinks", "Final", random.Random(3)) == generate_sku(
            "Tea", "Drinks", "Final", random.Random(3)
        )


class TestGenerateInvoiceNumber:
    def test_format(self):
        assert re.fullmatch(r"INV-\d{6}-\d{3}", generate_invoice_number())

    def test_random_part_is_zero_padded(self):
        class Zero(random.Random):
            def randint(self, a, b):
                return 7

        assert generate_invoice_number(Zero()).endswith("-007")
