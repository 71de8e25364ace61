"""MSL export and downloadable upload templates."""

import re
from collections.abc import Iterable
from datetime import date
from typing import Optional

from fieldsales.models.records import MSLItem

MSL_HEADER = "CATEGORY,SKU_CODE,PRODUCT_NAME,PRIORITY,NOTES"

_LINE_BREAKS = re.compile(r"\r\n|\r|\n")


def _one_line(value: str) -> str:
    """Fold line breaks to spaces: the upload parser reads one record per line."""
    return _LINE_BREAKS.sub(" ", value)


def _quoted(value: str) -> str:
    return '"' + _one_line(value).replace('"', '""') + '"'


def _plain(value: str) -> str:
    """Quote only when the value contains a comma or a quote."""
    value = _one_line(value)
    if "," in value or '"' in value:
        return _quoted(value)
    return value


def msl_export_filename(today: Optional[date] = None) -> str:
    return f"msl_export_{(today or date.today()).isoformat()}.csv"


def export_msl(items: Iterable[MSLItem], today: Optional[date] = None) -> tuple[str, str]:
    """Serialize MSL items sorted by category then priority. Returns (filename, csv_text).

    PRODUCT_NAME and NOTES are always quoted.
    """
    ordered = sorted(items, key=lambda i: (i.category, i.priority, i.sku_code))
    lines = [MSL_HEADER]
    for item in ordered:
        lines.append(
            ",".join(
                [
                    _plain(item.category),
                    _plain(item.sku_code),
                    _quoted(item.product_name),
                    str(item.priority),
                    _quoted(item.notes or ""),
                ]
            )
        )
    return msl_export_filename(today), "\n".join(lines)


TEMPLATES: dict[str, tuple[str, str]] = {
    "msl": (
        "msl_template.csv",
        """CATEGORY,SKU_CODE,PRODUCT_NAME,PRIORITY,NOTES
GT PROV,LOR001,L'Oreal Paris Voluminous Mascara,1,Top seller - high margin
GT PROV,LOR002,L'Oreal Paris Foundation,2,Popular shade range
GT PROV,GAR001,Garnier Fructis Shampoo,3,Volume driver
GT Wholesale,LOR004,L'Oreal Wholesale Pack A,1,Bulk discount available
GT Wholesale,GAR002,Garnier Wholesale Bundle,2,High volume product
GT Small Cosmetics,LOR005,L'Oreal Mini Lipstick Set,1,Perfect for small stores
GT Small Cosmetics,GAR003,Garnier Travel Size,2,Impulse purchase""",
    ),
    "products": (
        "product_template.csv",
        """SKU_CODE,PRODUCT_NAME,BRAND,CATEGORY,PRICE,DISCOUNT
SKU001,L'Oreal Paris Voluminous Mascara,L'Oreal Paris,Makeup,185000,10
SKU002,Garnier Fructis Shampoo,Garnier,Hair Care,45000,0
SKU003,Maybelline Foundation,Maybelline,Makeup,125000,15""",
    ),
    "stores": (
        "store_template.csv",
        """KODE_TOKO,NAMA_TOKO,KATEGORI,ALAMAT,GOOGLE_MAPS,ROUTE,TELEPON,AVG_ORDER_VALUE,FREKUENSI_ORDER,KONTAK_UTAMA,CATATAN
BC001,Beauty Corner,GT Small Cosmetics,"Jl. Sudirman No. 123, Jakarta",https://maps.google.com/...,A,+62812345678,750000,Monthly,Sari Dewi,Toko kosmetik terpercaya
WH002,Wholesale Cantik,GT Wholesale,"Jl. Gajah Mada No. 456, Surabaya",,B,+62823456789,1200000,Bi-weekly,Budi Santoso,Distributor besar
PROV003,Provinsi Beauty,GT PROV,"Jl. Diponegoro No. 789, Bandung",https://maps.google.com/...,C,+62834567890,2000000,Weekly,Maya Sari,Outlet provinsi utama""",
    ),
}


def template_csv(kind: str) -> tuple[str, str]:
    """Return (filename, csv_text) of the sample upload for kind."""
    try:
        return TEMPLATES[kind]
    except KeyError:
        raise ValueError(f"Unknown template {kind!r}. Expected one of: {', '.join(TEMPLATES)}") from None
