import os
import sys
import unittest

# Add parent directory to path to import modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.ordering import order_businesses, tier_rank
from services.records import BusinessRecord


def _biz(id, tier="free", rating=None, review_count=0):
    return BusinessRecord(id=id, city_id=1, name=f"Biz {id}", slug=f"biz-{id}",
                          tier=tier, rating=rating, review_count=review_count)


class TestBusinessOrdering(unittest.TestCase):
    def test_tier_beats_rating(self):
        ordered = order_businesses([
            _biz(1, "free", 5.0, 999),
            _biz(2, "verified", 3.0, 1),
            _biz(3, "featured", 1.0, 1),
        ])
        self.assertEqual([b.id for b in ordered], [3, 2, 1])

    def test_unrated_after_rated_within_tier(self):
        ordered = order_businesses([
            _biz(1, "verified", None, 0),
            _biz(2, "verified", 0.0, 0),
            _biz(3, "free", 4.0, 2),
        ])
        # A 0.0 rating is still a rating
        self.assertEqual([b.id for b in ordered], [2, 1, 3])

    def test_review_count_then_id_break_ties(self):
        ordered = order_businesses([
            _biz(9, "free", 4.5, 10),
            _biz(4, "free", 4.5, 80),
            _biz(2, "free", 4.5, 10),
        ])
        self.assertEqual([b.id for b in ordered], [4, 2, 9])

    def test_adjacent_pairs_hold_the_ordering_property(self):
        businesses = [
            _biz(i, tier, rating, (i * 13) % 50)
            for i, (tier, rating) in enumerate(
                [("free", 4.2), ("featured", None), ("verified", 4.9), ("free", None),
                 ("featured", 3.3), ("verified", None), ("verified", 4.9), ("free", 5.0)],
                start=1,
            )
        ]
        ordered = order_businesses(businesses)
        for a, b in zip(ordered, ordered[1:]):
            self.assertGreaterEqual(tier_rank(a.tier), tier_rank(b.tier))
            if a.tier == b.tier:
                ra = a.rating if a.rating is not None else float("-inf")
                rb = b.rating if b.rating is not None else float("-inf")
                self.assertGreaterEqual(ra, rb)

    def test_unknown_tier_sorts_last(self):
        ordered = order_businesses([_biz(1, "premium", 5.0, 10), _biz(2, "free", None, 0)])
        self.assertEqual([b.id for b in ordered], [2, 1])

    def test_empty(self):
        self.assertEqual(order_businesses([]), [])


if __name__ == '__main__':
    unittest.main()
