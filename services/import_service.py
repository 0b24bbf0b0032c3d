"""
Bulk product import.

Runs each candidate record through validation, duplicate detection and a
retried insert, strictly one record at a time, and collects a per-row
report. A bad row never stops the batch.

Record lifecycle:
    pending → validating → rejected (invalid)
            → checking duplicates → rejected (duplicate)
            → persisting → committed | rejected (retries exhausted)
"""

from typing import Any, Callable, Mapping, Optional, Sequence
import time
import structlog

from config.settings import settings
from models.product import ProductResponse
from models.product_import import ImportResult, ImportRowError
from services.catalog import ProductCatalog, get_catalog
from services.duplicate_detector import check_for_duplicates
from services.product_validator import validate_product_data
from services.refresh_events import ProductRefreshEvents, get_refresh_events
from utils.retry import retry_operation

logger = structlog.get_logger(__name__)


class ProductImportService:
    """
    Import orchestrator.

    The known-set (catalog snapshot plus everything accepted so far in the
    batch) is local to one import_batch call.
    """

    def __init__(
        self,
        catalog: ProductCatalog,
        events: Optional[ProductRefreshEvents] = None,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
        max_jitter: Optional[float] = None,
        sleep: Callable[[float], Any] = time.sleep
    ):
        self.catalog = catalog
        self.events = events
        self.max_retries = settings.import_max_retries if max_retries is None else max_retries
        self.base_delay = settings.import_retry_base_delay if base_delay is None else base_delay
        self.max_jitter = settings.import_retry_max_jitter if max_jitter is None else max_jitter
        self.sleep = sleep

    def import_batch(self, records: Sequence[Mapping[str, Any]]) -> ImportResult:
        """
        Import candidate records in order.

        Args:
            records: Row-parsed candidates, in source order

        Returns:
            ImportResult; failed entries carry their index in ``records``
        """
        logger.info("import_batch_started", count=len(records))

        known_products = self._load_known_products()
        successful: list[ProductResponse] = []
        failed: list[ImportRowError] = []

        for index, record in enumerate(records):
            try:
                product, reasons = self._import_record(record, known_products)
            except Exception as e:
                # Unexpected failure outside the modelled states; keep going
                logger.error(
                    "import_record_crashed",
                    index=index,
                    error=str(e),
                    error_type=type(e).__name__
                )
                product, reasons = None, [str(e) or "Unknown error occurred"]

            if product is not None:
                successful.append(product)
                known_products.append(product)
                logger.info(
                    "import_record_created",
                    index=index,
                    product_id=product.id,
                    part_number=product.part_number
                )
            else:
                failed.append(ImportRowError(
                    record=_as_dict(record),
                    error="; ".join(reasons),
                    index=index
                ))
                logger.info(
                    "import_record_rejected",
                    index=index,
                    reasons=reasons
                )

        result = ImportResult(
            successful=successful,
            failed=failed,
            total_processed=len(records)
        )

        logger.info(
            "import_batch_completed",
            total=result.total_processed,
            successful=result.success_count,
            failed=result.failure_count
        )

        if successful and self.events is not None:
            self.events.emit(
                "import",
                count=len(successful),
                product_ids=[p.id for p in successful]
            )

        return result

    def _load_known_products(self) -> list[ProductResponse]:
        """Catalog snapshot; an unreadable catalog means an empty known-set."""
        try:
            products = self.catalog.list_products()
            logger.info("import_catalog_loaded", count=len(products))
            return list(products)
        except Exception as e:
            logger.warning(
                "import_catalog_unavailable",
                error=str(e),
                error_type=type(e).__name__
            )
            return []

    def _import_record(
        self,
        record: Mapping[str, Any],
        known_products: list[ProductResponse]
    ) -> tuple[Optional[ProductResponse], list[str]]:
        """Returns (product, []) when committed, (None, reasons) when rejected."""
        if not isinstance(record, Mapping):
            return None, ["Product record must be an object"]

        validation = validate_product_data(record)
        if not validation.is_valid:
            return None, validation.errors

        duplicates = check_for_duplicates(record, known_products)
        if duplicates:
            return None, duplicates

        try:
            product = retry_operation(
                lambda: self.catalog.create_product(record),
                max_retries=self.max_retries,
                base_delay=self.base_delay,
                max_jitter=self.max_jitter,
                sleep=self.sleep,
                operation_name="create_product"
            )
        except Exception as e:
            message = getattr(e, "message", None) or str(e) or "Unknown error occurred"
            return None, [message]

        return product, []


def _as_dict(record: Any) -> dict:
    if isinstance(record, Mapping):
        return dict(record)
    return {"value": record}


def get_import_service() -> ProductImportService:
    """Build an import service over the configured catalog."""
    return ProductImportService(
        catalog=get_catalog(),
        events=get_refresh_events()
    )
