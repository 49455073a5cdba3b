"""Tests for tax records, the family matcher and the classification table."""

import pytest

from gst_invoice.tax_resolution.catalog import (
    NO_TAX,
    NO_TAX_RECORD,
    TaxCatalog,
    TaxFamily,
    TaxRecord,
    classify_family,
    find_matching_tax,
)
from gst_invoice.tax_resolution.classification import ClassificationTable, HsnTaxIds


class TestTaxRecord:
    def test_family_from_name(self):
        assert classify_family("IGST18") is TaxFamily.INTERSTATE
        assert classify_family("igst 3%") is TaxFamily.INTERSTATE
        assert classify_family("GST18 (CGST 9 + SGST 9)") is TaxFamily.INTRASTATE
        assert classify_family("") is TaxFamily.INTRASTATE

    def test_from_dict_classifies_once(self):
        record = TaxRecord.from_dict(
            {"tax_id": "1", "tax_name": "IGST18", "tax_percentage": "18", "tax_type": "tax"}
        )
        assert record.tax_percentage == 18.0
        assert record.family is TaxFamily.INTERSTATE
        assert record.is_igst

    def test_from_dict_requires_id(self):
        with pytest.raises(ValueError, match="tax_id"):
            TaxRecord.from_dict({"tax_name": "GST18", "tax_percentage": 18})

    def test_from_dict_rejects_bad_percentage(self):
        with pytest.raises(ValueError, match="non-numeric"):
            TaxRecord.from_dict({"tax_id": "x", "tax_name": "GST", "tax_percentage": "abc"})


class TestFamilyMatcher:
    def test_matches_rate_and_family(self, catalog):
        assert find_matching_tax(catalog, 18, TaxFamily.INTERSTATE).tax_id == "IGST18"
        assert find_matching_tax(catalog, 18, TaxFamily.INTRASTATE).tax_id == "GST18"
        assert find_matching_tax(catalog, 0.25, TaxFamily.INTERSTATE).tax_id == "IGST0.25"

    def test_rate_tolerance(self, catalog):
        assert find_matching_tax(catalog, 18.005, TaxFamily.INTRASTATE).tax_id == "GST18"
        assert find_matching_tax(catalog, 18.02, TaxFamily.INTRASTATE) is None

    def test_never_picks_wrong_family(self):
        catalog = TaxCatalog.from_provider(
            [{"tax_id": "GST18", "tax_name": "GST18", "tax_percentage": 18}]
        )
        assert find_matching_tax(catalog, 18, TaxFamily.INTERSTATE) is None

    def test_zero_rate_ignores_family(self):
        catalog = TaxCatalog.from_provider([
            {"tax_id": "IGST18", "tax_name": "IGST18", "tax_percentage": 18},
            {"tax_id": "IGST0", "tax_name": "IGST0", "tax_percentage": 0},
        ])
        assert find_matching_tax(catalog, 0, TaxFamily.INTRASTATE).tax_id == "IGST0"

    def test_zero_rate_falls_back_to_no_tax(self, catalog):
        assert find_matching_tax(catalog, 0, TaxFamily.INTERSTATE) is NO_TAX_RECORD
        assert NO_TAX_RECORD.tax_id == NO_TAX


class TestTaxCatalog:
    def test_accepts_provider_response(self, tax_list):
        catalog = TaxCatalog.from_provider({"code": 0, "taxes": tax_list})
        assert len(catalog) == len(tax_list)
        assert [r.tax_id for r in catalog][:2] == ["GST18", "IGST18"]

    def test_empty_catalog_is_falsy(self):
        assert not TaxCatalog()
        assert not TaxCatalog.from_provider({"taxes": []})

    def test_percentage_of(self, catalog):
        assert catalog.percentage_of("IGST3") == 3
        assert catalog.percentage_of(NO_TAX) == 0
        assert catalog.percentage_of("missing") == 0
        assert catalog.percentage_of(None) == 0

    def test_has_equivalent(self, catalog):
        assert catalog.has_equivalent(3, TaxFamily.INTERSTATE)
        assert not catalog.has_equivalent(12, TaxFamily.INTERSTATE)


class TestClassificationTable:
    def test_builtin_rates(self):
        table = ClassificationTable()
        assert table.rate_for("83062990") == 18
        assert table.rate_for("05080010") == 0.25
        assert table.rate_for("14049070") == 0
        assert table.rate_for("999591") == 0
        assert table.rate_for("12345678") is None
        assert table.rate_for(None) is None

    def test_builtin_tax_ids(self):
        ids = ClassificationTable().tax_ids_for("83062990")
        assert ids.for_family(TaxFamily.INTERSTATE) == "3355221000000032375"
        assert ids.for_family(TaxFamily.INTRASTATE) == "3355221000000032451"
        assert ClassificationTable().tax_ids_for("999591") is None

    def test_code_whitespace_is_ignored(self):
        assert ClassificationTable().rate_for(" 71179090 ") == 3
        assert " 71179090" in ClassificationTable()

    def test_from_dict(self):
        table = ClassificationTable.from_dict({
            "1001": {"rate": 5, "inter": "I5", "intra": "G5"},
            "2002": {"rate": 12},
        })
        assert len(table) == 2
        assert table.tax_ids_for("1001") == HsnTaxIds(inter="I5", intra="G5")
        assert table.tax_ids_for("2002") is None
        assert table.rate_for("83062990") is None

    def test_from_dict_requires_rate(self):
        with pytest.raises(ValueError, match="no rate"):
            ClassificationTable.from_dict({"1001": {"inter": "I5"}})

    @pytest.mark.parametrize("entry", [18, "18", None, ["rate", 18]])
    def test_from_dict_rejects_non_object_entry(self, entry):
        with pytest.raises(ValueError, match="must map to an object"):
            ClassificationTable.from_dict({"83062990": entry})

    def test_negative_rate_rejected(self):
        with pytest.raises(ValueError, match="Negative"):
            ClassificationTable(rates={"1001": -1})

    def test_from_file(self, tmp_path):
        path = tmp_path / "hsn.json"
        path.write_text('{"1001": {"rate": 12.5}}', encoding="utf-8")
        assert ClassificationTable.from_file(str(path)).rate_for("1001") == 12.5
