"""Tests for MSL export and upload templates."""

import os
import sys
import unittest
from datetime import date
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fieldsales.models.records import MSLItem
from fieldsales.reconcile.export import MSL_HEADER, export_msl, template_csv
from fieldsales.reconcile.parser import parse
from fieldsales.reconcile.schemas import MSL_SCHEMA, get_schema

ITEMS = [
    MSLItem(category="GT Wholesale", sku_code="GAR002", product_name="Garnier Bundle", priority=2),
    MSLItem(category="GT PROV", sku_code="LOR002", product_name='Foundation "Matte", 30ml', priority=2, notes="shade, range"),
    MSLItem(category="GT PROV", sku_code="LOR001", product_name="L'Oreal Mascara", priority=1, notes="Top seller"),
    MSLItem(category="GT Wholesale", sku_code="LOR004", product_name="Pack A", priority=1),
]


class TestExportMsl(unittest.TestCase):
    def test_filename_has_iso_date(self):
        filename, _ = export_msl(ITEMS, today=date(2025, 7, 17))
        self.assertEqual(filename, "msl_export_2025-07-17.csv")

    def test_sorted_and_quoted(self):
        _, text = export_msl(ITEMS, today=date(2025, 7, 17))
        lines = text.split("\n")
        self.assertEqual(lines[0], MSL_HEADER)
        self.assertEqual(lines[1], 'GT PROV,LOR001,"L\'Oreal Mascara",1,"Top seller"')
        self.assertEqual(lines[2], 'GT PROV,LOR002,"Foundation ""Matte"", 30ml",2,"shade, range"')
        self.assertEqual(lines[3], 'GT Wholesale,LOR004,"Pack A",1,""')
        self.assertEqual(len(lines), 5)

    def test_export_then_parse_round_trip(self):
        """Re-parsing the export yields every item back with no invalid rows."""
        _, text = export_msl(ITEMS)
        result = parse(text, MSL_SCHEMA)
        self.assertEqual(result.valid_count, len(ITEMS))
        self.assertEqual(result.invalid_count, 0)
        parsed = {(i.category, i.sku_code): i for i in (r.item for r in result.valid_rows())}
        for item in ITEMS:
            self.assertEqual(parsed[(item.category, item.sku_code)], item)

    def test_multiline_notes_export_on_one_line(self):
        item = MSLItem(category="X", sku_code="A", product_name="Alpha\nLarge", priority=1, notes="first\r\nsecond")
        _, text = export_msl([item])
        self.assertEqual(text.split("\n"), [MSL_HEADER, 'X,A,"Alpha Large",1,"first second"'])
        result = parse(text, MSL_SCHEMA)
        self.assertEqual(result.invalid_count, 0)
        self.assertEqual(result.valid_rows()[0].item.notes, "first second")

    def test_empty_export_is_header_only(self):
        _, text = export_msl([])
        self.assertEqual(text, MSL_HEADER)


class TestTemplates(unittest.TestCase):
    def test_templates_parse_cleanly(self):
        for kind, expected_name in (
            ("msl", "msl_template.csv"),
            ("products", "product_template.csv"),
            ("stores", "store_template.csv"),
        ):
            with self.subTest(kind=kind):
                filename, content = template_csv(kind)
                self.assertEqual(filename, expected_name)
                result = parse(content, get_schema(kind))
                self.assertEqual(result.invalid_count, 0)
                self.assertGreater(result.valid_count, 0)

    def test_store_template_address_keeps_comma(self):
        _, content = template_csv("stores")
        store = parse(content, get_schema("stores")).valid_rows()[0].item
        self.assertEqual(store.address, "Jl. Sudirman No. 123, Jakarta")

    def test_unknown_template(self):
        with self.assertRaises(ValueError):
            template_csv("visits")


if __name__ == "__main__":
    unittest.main()
