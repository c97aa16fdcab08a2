import json
import os
import sys
import tempfile
import unittest

# Add parent directory to path to import modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.pricing import (
    NATIONAL_BASE_PRICING, compute_city_pricing, load_pricing_reference,
    population_multiplier, regional_multiplier,
)


class TestPricingReference(unittest.TestCase):
    def test_default_reference_is_read_only(self):
        reference = load_pricing_reference(path="")
        self.assertEqual(dict(reference), NATIONAL_BASE_PRICING)
        with self.assertRaises(TypeError):
            reference[10] = (1, 2)

    def test_reference_from_file(self):
        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as fh:
            json.dump({"10": {"low": 100, "high": 150}, "20": {"low": 200, "high": 260}}, fh)
        try:
            reference = load_pricing_reference(path=fh.name)
        finally:
            os.unlink(fh.name)
        self.assertEqual(dict(reference), {10: (100, 150), 20: (200, 260)})

    def test_reference_rejects_inverted_range(self):
        with tempfile.NamedTemporaryFile("w", suffix=".json", delete=False) as fh:
            json.dump({"10": {"low": 300, "high": 150}}, fh)
        try:
            with self.assertRaises(ValueError):
                load_pricing_reference(path=fh.name)
        finally:
            os.unlink(fh.name)


class TestRegionalPricing(unittest.TestCase):
    def test_population_bands(self):
        self.assertEqual(population_multiplier(2_000_000), 1.18)
        self.assertEqual(population_multiplier(100_000), 1.00)
        self.assertEqual(population_multiplier(1_000), 0.94)

    def test_unknown_state_uses_national_rate(self):
        self.assertEqual(regional_multiplier("puerto-rico", 100_000), 1.0)

    def test_big_new_york_city(self):
        rows = {r["size_yards"]: r for r in compute_city_pricing("new-york", 8_000_000)}
        self.assertEqual((rows[20]["price_low"], rows[20]["price_high"]), (540, 685))

    def test_rows_cover_reference_sizes_in_fives(self):
        rows = compute_city_pricing("texas", 961_855)

        self.assertEqual([r["size_yards"] for r in rows], [10, 15, 20, 30, 40])
        for r in rows:
            self.assertEqual(r["price_low"] % 5, 0)
            self.assertEqual(r["price_high"] % 5, 0)
            self.assertLessEqual(r["price_low"], r["price_high"])
            self.assertEqual(r["rental_days_included"], 7)


if __name__ == '__main__':
    unittest.main()
