"""
Tests for the class-time codec.

Format: "<day> at <time>[ in <classroom>]" joined with ", ".
"""

import unittest

from nesttask.schedule import ClassTime, MalformedScheduleError, decode, encode


class TestEncode(unittest.TestCase):
    def test_entry_with_classroom(self) -> None:
        self.assertEqual(encode([ClassTime("Mon", "10:00", "R1")]), "Mon at 10:00 in R1")

    def test_entries_are_joined_in_order(self) -> None:
        text = encode([ClassTime("Mon", "10:00", "R1"), ClassTime("Wed", "14:00")])
        self.assertEqual(text, "Mon at 10:00 in R1, Wed at 14:00")

    def test_accepts_plain_mappings(self) -> None:
        # payloads coming from JSON are dicts, an empty classroom means none
        text = encode([{"day": "Tue", "time": "09:30", "classroom": ""}])
        self.assertEqual(text, "Tue at 09:30")

    def test_empty_list(self) -> None:
        self.assertEqual(encode([]), "")

    def test_rejects_values_containing_separators(self) -> None:
        with self.assertRaises(MalformedScheduleError) as ctx:
            encode([ClassTime("Mon", "10:00"), ClassTime("Tue", "9:00", "Lab, 2nd floor")])
        self.assertEqual(ctx.exception.index, 1)

    def test_rejects_separators_formed_at_field_edges(self) -> None:
        cases = [
            ClassTime("Mon,", "10:00"),
            ClassTime("Mon at", "10:00"),
            ClassTime("Mon", "10:00", "in R1"),
            ClassTime("Mon", "10:00,", "R1"),
            ClassTime("Mon", "10:00 in", "R1"),
        ]
        for ct in cases:
            with self.subTest(ct=ct):
                with self.assertRaises(MalformedScheduleError) as ctx:
                    encode([ClassTime("Sun", "08:30"), ct])
                self.assertEqual(ctx.exception.index, 1)

    def test_empty_classroom_on_class_time_reads_back(self) -> None:
        text = encode([ClassTime("Mon", "10:00", "")])
        self.assertEqual(text, "Mon at 10:00")
        self.assertEqual(decode(text), [ClassTime("Mon", "10:00")])


class TestDecode(unittest.TestCase):
    def test_entry_with_classroom(self) -> None:
        self.assertEqual(decode("Mon at 10:00 in R1"), [ClassTime("Mon", "10:00", "R1")])

    def test_mixed_entries(self) -> None:
        self.assertEqual(
            decode("Sun at 08:30, Tue at 11:00 in AB4-702"),
            [ClassTime("Sun", "08:30"), ClassTime("Tue", "11:00", "AB4-702")],
        )

    def test_empty_or_missing_text(self) -> None:
        self.assertEqual(decode(""), [])
        self.assertEqual(decode(None), [])

    def test_round_trip(self) -> None:
        entries = [ClassTime("Mon", "10:00", "R1"), ClassTime("Thu", "13:00"), ClassTime("Fri", "8:00", "Hall B")]
        self.assertEqual(decode(encode(entries)), entries)

    def test_fragment_without_at_is_reported_with_its_index(self) -> None:
        with self.assertRaises(MalformedScheduleError) as ctx:
            decode("Mon at 10:00, Tuesday morning")
        self.assertEqual(ctx.exception.index, 1)
        self.assertEqual(ctx.exception.fragment, "Tuesday morning")


if __name__ == "__main__":
    unittest.main()
