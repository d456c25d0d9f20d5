import unittest
from datetime import datetime, timezone

from domain.enums import Rarity
from domain.models import GeneratedItem, GeneratedList
from ui.formatters import create_rarity_chart, format_price, generated_list_to_dataframe, rarity_badge


def _sample_list(*items):
    return GeneratedList(hub_id="h1", hub_name="Forest Cache", items=items,
                         timestamp=datetime(2026, 1, 1, tzinfo=timezone.utc))


class TestFormatters(unittest.TestCase):
    def test_format_price(self):
        self.assertEqual(format_price(50), "50 gp")
        self.assertEqual(format_price(1500), "1.5k gp")
        self.assertEqual(format_price(None), "N/A")

    def test_rarity_badge(self):
        badge = rarity_badge(Rarity.VERY_RARE)
        self.assertTrue(badge.endswith("-badge[Very Rare]"))

    def test_dataframe_keeps_generation_order(self):
        generated = _sample_list(
            GeneratedItem("p2", "Elven Cloak", Rarity.RARE, 50, 1),
            GeneratedItem("p1", "Trail Rations", Rarity.COMMON, 5, 3),
        )
        df = generated_list_to_dataframe(generated)
        self.assertEqual(list(df["Item"]), ["Elven Cloak", "Trail Rations"])
        self.assertEqual(list(df["Value"]), [50, 15])

    def test_rarity_chart(self):
        self.assertIsNone(create_rarity_chart(_sample_list()))
        fig = create_rarity_chart(_sample_list(GeneratedItem("p1", "Trail Rations", Rarity.COMMON, 5, 3)))
        self.assertEqual(list(fig.data[0].y), [3])


if __name__ == "__main__":
    unittest.main()
