import unittest
from decimal import Decimal
from unittest.mock import MagicMock

from directory_fixtures import TempDirectoryStore, seed_texas, AUSTIN

from sqlalchemy.exc import OperationalError

from services import registry
from services.errors import StoreUnavailable


class TestDirectoryRegistry(unittest.TestCase):
    def setUp(self):
        self.store = TempDirectoryStore()
        self.ids = seed_texas(self.store.session_factory)
        self.db = self.store.session_factory()

    def tearDown(self):
        self.db.close()
        self.store.close()

    # ---- cities ----
    def test_get_city_by_slug_is_idempotent(self):
        first = registry.get_city_by_slug(self.db, "texas", "austin")
        second = registry.get_city_by_slug(self.db, "texas", "austin")

        self.assertIsNotNone(first)
        self.assertEqual(first, second)
        self.assertEqual(first.id, self.ids["austin"])
        self.assertEqual((first.latitude, first.longitude), AUSTIN)

    def test_get_city_by_slug_not_found(self):
        self.assertIsNone(registry.get_city_by_slug(self.db, "texas", "atlantis"))

    def test_malformed_slug_never_hits_the_store(self):
        db = MagicMock()
        self.assertIsNone(registry.get_city_by_slug(db, "Texas", "austin"))
        self.assertIsNone(registry.get_city_by_slug(db, "texas", ""))
        self.assertIsNone(registry.get_city_by_slug(db, "texas", "new york"))
        db.query.assert_not_called()

    def test_store_failure_is_not_not_found(self):
        db = MagicMock()
        db.query.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))

        with self.assertRaises(StoreUnavailable) as cm:
            registry.get_city_by_slug(db, "texas", "austin")
        self.assertEqual(cm.exception.operation, "get_city_by_slug")

    def test_out_of_range_ids_never_hit_the_store(self):
        db = MagicMock()
        for city_id in (0, -5, 2**31, 10**30):
            self.assertIsNone(registry.get_city_by_id(db, city_id))
            self.assertEqual(registry.get_businesses_by_city(db, city_id), [])
            self.assertEqual(registry.get_city_pricing(db, city_id), [])
        db.get.assert_not_called()
        db.query.assert_not_called()

    def test_cities_by_state_largest_first(self):
        slugs = [c.city_slug for c in registry.get_cities_by_state(self.db, "texas")]
        self.assertEqual(slugs, ["austin", "waco", "temple", "cedar-park"])
        self.assertEqual(registry.get_cities_by_state(self.db, "ohio"), [])

    def test_states_and_slugs(self):
        self.assertEqual(registry.get_all_states(self.db), [{"state": "TX", "state_slug": "texas"}])
        self.assertEqual(len(registry.get_all_city_slugs(self.db)), 4)
        self.assertEqual(registry.get_popular_cities(self.db, limit=1)[0].city_slug, "austin")

    # ---- businesses ----
    def test_businesses_in_display_order(self):
        businesses = registry.get_businesses_by_city(self.db, self.ids["austin"])
        # featured, verified 4.5/80, verified 4.5/20, verified unrated, free 4.9, free unrated
        self.assertEqual([b.id for b in businesses], [2, 5, 4, 3, 1, 7])

    def test_inactive_businesses_are_hidden(self):
        businesses = registry.get_businesses_by_city(self.db, self.ids["austin"])
        self.assertNotIn(6, [b.id for b in businesses])

    def test_city_without_businesses(self):
        self.assertEqual(registry.get_businesses_by_city(self.db, self.ids["temple"]), [])

    def test_business_by_path(self):
        business = registry.get_business_by_path(self.db, "texas", "austin", "barton-waste")
        self.assertEqual(business.id, 5)
        self.assertEqual(business.sizes_available, ("10 yard", "20 yard", "30 yard"))
        self.assertEqual(business.service_area_miles, 40)
        self.assertIsNone(registry.get_business_by_path(self.db, "texas", "austin", "closed-co"))
        self.assertIsNone(registry.get_business_by_path(self.db, "texas", "waco", "barton-waste"))

    def test_service_area_defaults(self):
        business = registry.get_business_by_path(self.db, "texas", "austin", "capital-dumpsters")
        self.assertEqual(business.sizes_available, ())
        self.assertEqual(business.service_area_miles, 25)

    def test_all_business_slugs_only_active(self):
        slugs = registry.get_all_business_slugs(self.db)

        self.assertEqual(len(slugs), 9)
        self.assertNotIn("closed-co", [s["slug"] for s in slugs])
        self.assertIn({"state_slug": "texas", "city_slug": "cedar-park", "slug": "new-hauler"}, slugs)
        self.assertEqual(slugs[0], {"state_slug": "texas", "city_slug": "austin", "slug": "barton-waste"})

    # ---- pricing ----
    def test_city_pricing_rows(self):
        rows = registry.get_city_pricing(self.db, self.ids["austin"])

        self.assertEqual([r.size_yards for r in rows], [10, 20])
        self.assertEqual((rows[0].price_low, rows[0].price_high), (Decimal("275"), Decimal("450")))
        self.assertEqual((rows[1].price_low, rows[1].price_high), (Decimal("375"), Decimal("575")))
        for r in rows:
            self.assertLessEqual(r.price_low, r.price_high)

    def test_city_without_pricing(self):
        self.assertEqual(registry.get_city_pricing(self.db, self.ids["temple"]), [])

    # ---- nearby ----
    def test_nearby_cities_from_austin(self):
        lat, lon = AUSTIN
        nearby = registry.get_nearby_cities(self.db, self.ids["austin"], lat, lon, 2)

        self.assertEqual([n.city.city_slug for n in nearby], ["cedar-park", "temple"])
        self.assertAlmostEqual(nearby[0].distance_miles, 10.0, places=6)
        self.assertAlmostEqual(nearby[1].distance_miles, 50.0, places=6)

    def test_nearby_limit_larger_than_dataset(self):
        lat, lon = AUSTIN
        nearby = registry.get_nearby_cities(self.db, self.ids["austin"], lat, lon, 10)
        self.assertEqual([n.city.city_slug for n in nearby], ["cedar-park", "temple", "waco"])


if __name__ == '__main__':
    unittest.main()
