from __future__ import annotations

import unittest

from niaxtu_admin.storage.firestore_schema import (
    ALL_COLLECTIONS,
    normalize_color,
    normalize_document_id,
    normalize_iso_datetime,
    normalize_name,
)


class FirestoreSchemaTest(unittest.TestCase):
    def test_collections_match_backend_set(self) -> None:
        self.assertEqual(
            set(ALL_COLLECTIONS),
            {
                "sectors",
                "subSectors",
                "structures",
                "complaintTypes",
                "targetTypes",
                "complaints",
                "logs",
                "audit_logs",
            },
        )

    def test_document_id_normalization(self) -> None:
        self.assertEqual(normalize_document_id(" mk2x4-12 "), "mk2x4-12")
        for invalid in ("", "a/b", "has space", "x" * 129):
            with self.subTest(invalid=invalid):
                with self.assertRaises(ValueError):
                    normalize_document_id(invalid)

    def test_name_is_trimmed_and_required(self) -> None:
        self.assertEqual(normalize_name("  Santé "), "Santé")
        with self.assertRaises(ValueError):
            normalize_name("   ")

    def test_color_is_lowercased_hex(self) -> None:
        self.assertEqual(normalize_color("#3B82F6"), "#3b82f6")
        for invalid in ("3b82f6", "#fff", "#zzzzzz"):
            with self.subTest(invalid=invalid):
                with self.assertRaises(ValueError):
                    normalize_color(invalid)

    def test_iso_datetime_is_converted_to_utc(self) -> None:
        self.assertEqual(
            normalize_iso_datetime("2026-03-01T10:00:00+02:00"),
            "2026-03-01T08:00:00+00:00",
        )
        with self.assertRaises(ValueError):
            normalize_iso_datetime("2026-03-01T10:00:00")
        with self.assertRaises(ValueError):
            normalize_iso_datetime("yesterday")


if __name__ == "__main__":
    unittest.main()
