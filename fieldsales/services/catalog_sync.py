"""Product and store bulk upload: snapshot existing keys, parse, then upsert by key."""

from collections.abc import Mapping
from typing import Any, Optional

from fieldsales.events import EventBus
from fieldsales.models.outcomes import UploadReport
from fieldsales.reconcile.commit import commit, fetch_existing_keys
from fieldsales.reconcile.parser import parse
from fieldsales.reconcile.schema import ColumnSchema
from fieldsales.reconcile.schemas import PRODUCT_SCHEMA, STORE_SCHEMA
from fieldsales.store.protocol import DataStore
from fieldsales.utils.logger import get_logger, log_row_errors

logger = get_logger("fieldsales.services.catalog_sync")


async def _upload(
    store: DataStore,
    schema: ColumnSchema,
    raw_text: str,
    scope: Optional[Mapping[str, Any]],
    dry_run: bool,
    parser_mode: Optional[str],
    bus: Optional[EventBus],
) -> UploadReport:
    existing = await fetch_existing_keys(store, schema, scope)
    result = parse(raw_text, schema, existing_keys=existing, parser_mode=parser_mode)
    log_row_errors(logger.bind(schema=schema.name), result.errors())
    if dry_run or not result.valid_count:
        logger.info(
            "catalog_sync.preview",
            schema=schema.name,
            valid=result.valid_count,
            invalid=result.invalid_count,
            dry_run=dry_run,
        )
        return UploadReport(parse=result)
    summary = await commit(store, schema, result, scope=scope, bus=bus)
    return UploadReport(parse=result, commit=summary)


async def upload_products(
    store: DataStore,
    raw_text: str,
    dry_run: bool = False,
    parser_mode: Optional[str] = None,
    bus: Optional[EventBus] = None,
) -> UploadReport:
    """Upsert products by SKU. New products are active; updates leave is_active alone."""
    return await _upload(store, PRODUCT_SCHEMA, raw_text, None, dry_run, parser_mode, bus)


async def upload_stores(
    store: DataStore,
    raw_text: str,
    owner_id: Optional[str] = None,
    dry_run: bool = False,
    parser_mode: Optional[str] = None,
    bus: Optional[EventBus] = None,
) -> UploadReport:
    """Upsert stores by code within owner_id's stores (all unowned stores when None)."""
    scope = {"created_by": owner_id}
    return await _upload(store, STORE_SCHEMA, raw_text, scope, dry_run, parser_mode, bus)
