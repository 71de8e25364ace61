"""Tests for product and store upload rules."""

import os
import sys
import unittest
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fieldsales.reconcile.parser import parse
from fieldsales.reconcile.schemas import (
    INVALID_AVG_ORDER,
    INVALID_DISCOUNT,
    INVALID_PRICE,
    PRODUCT_SCHEMA,
    STORE_SCHEMA,
    get_schema,
    parse_int,
    parse_number,
)

PRODUCT_HEADER = "SKU_CODE,PRODUCT_NAME,BRAND,CATEGORY,PRICE,DISCOUNT"


class TestProductRules(unittest.TestCase):
    def _reasons(self, *lines):
        result = parse("\n".join([PRODUCT_HEADER, *lines]), PRODUCT_SCHEMA)
        return [None if r.is_valid else r.reason for r in result.rows]

    def test_price_zero_is_invalid(self):
        self.assertEqual(self._reasons("SKU1,One,Br,Cat,0,0"), [INVALID_PRICE])

    def test_non_numeric_price_is_invalid(self):
        self.assertEqual(self._reasons("SKU1,One,Br,Cat,abc,0"), [INVALID_PRICE])

    def test_discount_out_of_range(self):
        self.assertEqual(self._reasons("SKU1,One,Br,Cat,100,150"), [INVALID_DISCOUNT])

    def test_non_numeric_discount(self):
        self.assertEqual(self._reasons("SKU1,One,Br,Cat,100,ten"), [INVALID_DISCOUNT])

    def test_discount_bounds_inclusive(self):
        self.assertEqual(self._reasons("SKU1,One,Br,Cat,100,0", "SKU2,Two,Br,Cat,100,100"), [None, None])

    def test_discount_omitted_defaults_to_zero(self):
        text = "SKU_CODE,PRODUCT_NAME,BRAND,CATEGORY,PRICE\nSKU1,One,Br,Cat,185000\n"
        result = parse(text, PRODUCT_SCHEMA)
        self.assertEqual(result.invalid_count, 0)
        product = result.valid_rows()[0].item
        self.assertEqual(product.discount, 0)
        self.assertEqual(product.unit_price, 185000)
        self.assertTrue(product.is_active)

    def test_blank_discount_defaults_to_zero(self):
        result = parse(PRODUCT_HEADER + "\nSKU1,One,Br,Cat,10,\n", PRODUCT_SCHEMA)
        self.assertEqual(result.valid_rows()[0].item.discount, 0)

    def test_duplicate_sku_in_file(self):
        reasons = self._reasons("SKU1,One,Br,Cat,10,0", "SKU1,Other,Br,Cat,12,0")
        self.assertEqual(reasons, [None, "Duplicate SKU in file"])

    def test_missing_brand(self):
        self.assertEqual(self._reasons("SKU1,One,,Cat,10,0"), ["Missing required fields"])


class TestStoreRules(unittest.TestCase):
    HEADER = "KODE_TOKO,NAMA_TOKO,KATEGORI,ALAMAT,ROUTE,AVG_ORDER_VALUE"

    def test_route_defaults_to_a(self):
        result = parse(self.HEADER + "\nBC001,Beauty Corner,GT PROV,Jl. Sudirman,,\n", STORE_SCHEMA)
        store = result.valid_rows()[0].item
        self.assertEqual(store.route, "A")
        self.assertEqual(store.average_order_value, 0)
        self.assertIsNone(store.created_by)

    def test_negative_average_order(self):
        result = parse(self.HEADER + "\nBC001,Beauty Corner,GT PROV,,B,-5\n", STORE_SCHEMA)
        self.assertEqual(result.rows[0].reason, INVALID_AVG_ORDER)

    def test_only_three_columns_required(self):
        result = parse("KODE_TOKO,NAMA_TOKO,KATEGORI\nBC001,Beauty Corner,GT PROV\n", STORE_SCHEMA)
        self.assertEqual(result.valid_count, 1)
        self.assertEqual(result.valid_rows()[0].item.address, "")

    def test_duplicate_store_code(self):
        text = self.HEADER + "\nBC001,One,GT,,,\nBC001,Two,GT,,,\n"
        result = parse(text, STORE_SCHEMA)
        self.assertEqual(result.rows[1].reason, "Duplicate store code in file")

    def test_store_row_leaves_owner_to_scope(self):
        result = parse(self.HEADER + "\nBC001,One,GT,,,\n", STORE_SCHEMA)
        row = STORE_SCHEMA.to_store_row(result.valid_rows()[0].item)
        self.assertNotIn("created_by", row)
        self.assertNotIn("id", row)


class TestNumberParsing(unittest.TestCase):
    def test_parse_number(self):
        self.assertEqual(parse_number(" 12.5 "), 12.5)
        self.assertIsNone(parse_number(""))
        self.assertIsNone(parse_number("1_000"))
        self.assertIsNone(parse_number("inf"))
        self.assertIsNone(parse_number("nan"))

    def test_parse_int(self):
        self.assertEqual(parse_int("7"), 7)
        self.assertIsNone(parse_int("7.0"))
        self.assertIsNone(parse_int("1e3"))

    def test_get_schema(self):
        self.assertIs(get_schema("products"), PRODUCT_SCHEMA)
        with self.assertRaises(ValueError):
            get_schema("orders")


if __name__ == "__main__":
    unittest.main()
