"""Tests for the CSV parser: structural errors, per-row outcomes, dedup and action tagging."""

import os
import sys
import unittest
from pathlib import Path

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fieldsales.models.outcomes import InvalidRow, RowAction, ValidRow
from fieldsales.reconcile.errors import EmptyInputError, SchemaMismatchError
from fieldsales.reconcile.parser import get_splitter, parse, split_csv, split_naive, strip_quotes
from fieldsales.reconcile.schemas import INVALID_PRIORITY, MSL_SCHEMA, PRODUCT_SCHEMA

MSL_HEADER = "CATEGORY,SKU_CODE,PRODUCT_NAME,PRIORITY,NOTES"


class TestStructuralErrors(unittest.TestCase):
    def test_header_only_is_empty(self):
        with self.assertRaises(EmptyInputError):
            parse(MSL_HEADER + "\n", MSL_SCHEMA)

    def test_blank_text_is_empty(self):
        with self.assertRaises(EmptyInputError) as ctx:
            parse("\n   \n", MSL_SCHEMA)
        self.assertIn("at least a header row", str(ctx.exception))

    def test_missing_priority_column_fails_before_rows(self):
        """Missing PRIORITY is reported as the missing column; no rows are parsed."""
        text = "CATEGORY,SKU_CODE,PRODUCT_NAME\nX,A,Alpha\n"
        with self.assertRaises(SchemaMismatchError) as ctx:
            parse(text, MSL_SCHEMA)
        self.assertEqual(ctx.exception.missing_columns, ["PRIORITY"])
        self.assertIn("PRIORITY", str(ctx.exception))

    def test_header_is_trimmed_and_case_insensitive(self):
        text = " category , sku_code,Product_Name, priority\nX,A,Alpha,1\n"
        result = parse(text, MSL_SCHEMA)
        self.assertEqual(result.valid_count, 1)

    def test_unknown_parser_mode(self):
        with self.assertRaises(ValueError):
            get_splitter("tsv")


class TestRowOutcomes(unittest.TestCase):
    def test_one_outcome_per_line_in_order(self):
        text = "\n".join(
            [
                MSL_HEADER,
                "X,A,Alpha,1,",
                "X,B,Beta,zero,",
                "X,C,Gamma,3,note",
                ",D,Delta,4,",
            ]
        )
        result = parse(text, MSL_SCHEMA)
        self.assertEqual([r.line_number for r in result.rows], [2, 3, 4, 5])
        self.assertEqual([r.is_valid for r in result.rows], [True, False, True, False])
        self.assertEqual(result.valid_count, 2)
        self.assertEqual(result.invalid_count, 2)
        self.assertEqual(result.rows[1].reason, INVALID_PRIORITY)
        self.assertEqual(result.rows[3].reason, MSL_SCHEMA.missing_reason)

    def test_blank_lines_keep_physical_line_numbers(self):
        text = MSL_HEADER + "\nX,A,Alpha,1\n\nX,B,Beta,2\n"
        result = parse(text, MSL_SCHEMA)
        self.assertEqual([r.line_number for r in result.rows], [2, 4])

    def test_unicode_line_separators_stay_inside_cells(self):
        text = MSL_HEADER + "\nX,A,Alpha\u2028Beta,1,\nX,B,Gamma\x0cDelta,2,note\u0085two\r\nX,C,Eps,3\n"
        result = parse(text, MSL_SCHEMA)
        self.assertEqual(len(result.rows), 3)
        self.assertEqual(result.invalid_count, 0)
        self.assertEqual([r.line_number for r in result.rows], [2, 3, 4])
        self.assertEqual(result.rows[0].item.product_name, "Alpha\u2028Beta")
        self.assertEqual(result.rows[1].item.notes, "note\u0085two")

    def test_bom_is_stripped(self):
        text = "\ufeff" + MSL_HEADER + "\nX,A,Alpha,1\n"
        self.assertEqual(parse(text, MSL_SCHEMA).valid_count, 1)

    def test_duplicate_key_in_same_category(self):
        """Second (category, sku) repeat is invalid; the first stays valid."""
        text = MSL_HEADER + "\nX,A,Alpha,1\nX,A,Alpha again,2\nY,A,Alpha in Y,1\n"
        result = parse(text, MSL_SCHEMA)
        first, second, other_category = result.rows
        self.assertIsInstance(first, ValidRow)
        self.assertIsInstance(second, InvalidRow)
        self.assertEqual(second.reason, "Duplicate SKU in same category")
        self.assertIsInstance(other_category, ValidRow)

    def test_first_failing_rule_wins(self):
        """A row with a blank required field and a bad priority reports only the missing field."""
        result = parse(MSL_HEADER + "\nX,,Alpha,-1\n", MSL_SCHEMA)
        self.assertEqual(result.errors()[0].reason, MSL_SCHEMA.missing_reason)
        self.assertEqual(str(result.errors()[0]), f"Row 2: {MSL_SCHEMA.missing_reason}")

    def test_priority_must_be_positive_integer(self):
        text = MSL_HEADER + "\nX,A,Alpha,0\nX,B,Beta,1.5\nX,C,Gamma,-2\nX,D,Delta,+4\n"
        result = parse(text, MSL_SCHEMA)
        self.assertEqual([r.is_valid for r in result.rows], [False, False, False, True])
        self.assertEqual(result.valid_rows()[0].item.priority, 4)

    def test_priority_must_fit_integer_column(self):
        text = MSL_HEADER + "\nX,A,Alpha,2147483647\nX,B,Beta,2147483648\nX,C,Gamma,99999999999999999999\n"
        result = parse(text, MSL_SCHEMA)
        self.assertEqual([r.is_valid for r in result.rows], [True, False, False])
        self.assertEqual({e.reason for e in result.errors()}, {INVALID_PRIORITY})

    def test_optional_column_absent_defaults_to_empty(self):
        result = parse("CATEGORY,SKU_CODE,PRODUCT_NAME,PRIORITY\nX,A,Alpha,1\n", MSL_SCHEMA)
        row = result.valid_rows()[0]
        self.assertEqual(row.record.get("NOTES"), "")
        self.assertIsNone(row.item.notes)

    def test_groups_sorted_by_priority(self):
        text = MSL_HEADER + "\nX,C,Gamma,3\nX,A,Alpha,1\nX,B,Beta,2\nY,Z,Zeta,1\n"
        groups = parse(text, MSL_SCHEMA).groups()
        self.assertEqual(list(groups), ["X", "Y"])
        self.assertEqual([i.sku_code for i in groups["X"]], ["A", "B", "C"])


class TestActionTagging(unittest.TestCase):
    PRODUCTS = "SKU_CODE,PRODUCT_NAME,BRAND,CATEGORY,PRICE\nSKU1,One,Br,Cat,10\nSKU2,Two,Br,Cat,20\n"

    def test_snapshot_tags_update_and_insert(self):
        result = parse(self.PRODUCTS, PRODUCT_SCHEMA, existing_keys={("SKU1",)})
        self.assertEqual([r.action for r in result.valid_rows()], [RowAction.UPDATE, RowAction.INSERT])

    def test_without_snapshot_everything_inserts(self):
        result = parse(self.PRODUCTS, PRODUCT_SCHEMA)
        self.assertTrue(all(r.action is RowAction.INSERT for r in result.valid_rows()))

    def test_msl_rows_are_replace(self):
        result = parse(MSL_HEADER + "\nX,A,Alpha,1\n", MSL_SCHEMA, existing_keys={("X", "A")})
        self.assertIs(result.valid_rows()[0].action, RowAction.REPLACE)


class TestSplitters(unittest.TestCase):
    def test_strip_quotes(self):
        self.assertEqual(strip_quotes('"abc"'), "abc")
        self.assertEqual(strip_quotes('"abc'), '"abc')
        self.assertEqual(strip_quotes('"'), '"')

    def test_naive_split(self):
        self.assertEqual(split_naive(' a , "b" ,c'), ["a", "b", "c"])

    def test_csv_split_keeps_quoted_commas(self):
        self.assertEqual(split_csv('a,"b, c","say ""hi"""'), ["a", "b, c", 'say "hi"'])

    def test_quoted_comma_depends_on_mode(self):
        """A quoted name containing a comma parses in csv mode and shifts columns in naive mode."""
        text = MSL_HEADER + '\nX,A,"Alpha, large",1,\n'
        conformant = parse(text, MSL_SCHEMA, parser_mode="csv")
        self.assertEqual(conformant.valid_rows()[0].item.product_name, "Alpha, large")

        naive = parse(text, MSL_SCHEMA, parser_mode="naive")
        self.assertEqual(naive.invalid_count, 1)
        self.assertEqual(naive.rows[0].reason, INVALID_PRIORITY)


if __name__ == "__main__":
    unittest.main()
