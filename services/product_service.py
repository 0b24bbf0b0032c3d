"""
Product service backed by the Supabase products table.

Store failures are wrapped in PersistenceError with an explicit ErrorKind
so the import pipeline can decide whether a retry makes sense.
"""

from typing import Any, Mapping, Optional
import httpx
import structlog
from postgrest.exceptions import APIError

from config import get_supabase_client, get_admin_client
from config.settings import settings
from models.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    Category,
)
from exceptions import (
    ErrorKind,
    PersistenceError,
    ProductNotFoundError,
    ProductPartNumberExistsError,
)
from utils.text_utils import normalize_key

logger = structlog.get_logger(__name__)

# PostgREST connection/timeout codes; every other PGRST code is a bad request
_PGRST_TRANSIENT = {"PGRST000", "PGRST001", "PGRST002", "PGRST003"}
# SQLSTATE classes: connection, tx rollback, resources, operator intervention
_SQLSTATE_TRANSIENT = ("08", "40", "53", "57")
# SQLSTATE classes: data exception, integrity violation, syntax/access rule
_SQLSTATE_CLIENT = ("22", "23", "42")

RECORD_FIELDS = ("name", "model", "category", "color", "description", "price", "image")


def classify_store_error(error: Exception) -> ErrorKind:
    """
    Map a Supabase/PostgREST/httpx failure to an ErrorKind.

    Args:
        error: Exception raised by the Supabase client

    Returns:
        CLIENT for rejected requests, TRANSIENT for network/availability
        problems, UNKNOWN otherwise
    """
    if isinstance(error, (httpx.TimeoutException, httpx.TransportError)):
        return ErrorKind.TRANSIENT

    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        if 400 <= status < 500 and status not in (408, 429):
            return ErrorKind.CLIENT
        return ErrorKind.TRANSIENT

    if isinstance(error, APIError):
        code = str(error.code or "")
        if code in _PGRST_TRANSIENT:
            return ErrorKind.TRANSIENT
        if code.startswith("PGRST"):
            return ErrorKind.CLIENT
        if code.startswith(_SQLSTATE_TRANSIENT):
            return ErrorKind.TRANSIENT
        if code.startswith(_SQLSTATE_CLIENT):
            return ErrorKind.CLIENT

    return ErrorKind.UNKNOWN


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value only matches itself."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def record_to_row(record: Mapping[str, Any]) -> dict:
    """
    Build a products-table row from a candidate record.

    Only known fields are sent; partNumber is stored as part_number.
    """
    row = {key: record.get(key) for key in RECORD_FIELDS}
    part_number = record.get("partNumber", record.get("part_number"))
    row["part_number"] = part_number.strip() if isinstance(part_number, str) else part_number
    if isinstance(row["category"], Category):
        row["category"] = row["category"].value
    if row["price"] is not None:
        row["price"] = float(row["price"])
    return row


class ProductService:
    """
    Product business logic.

    Handles CRUD operations for products and serves as the remote catalog
    for bulk imports.
    """

    def __init__(self):
        self.db = get_supabase_client()
        # Writes prefer the service-role client when row-level security is on
        self.write_db = get_admin_client() or self.db
        self.table = settings.products_table

    # ===================
    # READ OPERATIONS
    # ===================

    def get_all(
        self,
        page: int = 1,
        page_size: int = 20,
        category: Optional[Category] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None
    ) -> tuple[list[ProductResponse], int]:
        """
        Get products with optional filters.

        Args:
            page: Page number (1-indexed)
            page_size: Items per page
            category: Filter by display technology
            search: Case-insensitive match on name, model or part number
            min_price: Inclusive lower price bound
            max_price: Inclusive upper price bound

        Returns:
            Tuple of (products list, total count)
        """
        logger.info(
            "getting_products",
            page=page,
            page_size=page_size,
            category=category,
            search=search
        )

        try:
            query = self.db.table(self.table).select("*", count="exact")

            if category:
                query = query.eq("category", category.value)
            if search:
                pattern = f"%{search.strip()}%"
                query = query.or_(
                    f"name.ilike.{pattern},model.ilike.{pattern},part_number.ilike.{pattern}"
                )
            if min_price is not None:
                query = query.gte("price", min_price)
            if max_price is not None:
                query = query.lte("price", max_price)

            offset = (page - 1) * page_size
            query = query.range(offset, offset + page_size - 1)
            query = query.order("name")

            result = query.execute()

            products = [ProductResponse(**row) for row in result.data]
            total = result.count or 0

            logger.info(
                "products_retrieved",
                count=len(products),
                total=total
            )

            return products, total

        except Exception as e:
            logger.error(
                "get_products_failed",
                error=str(e)
            )
            raise PersistenceError("select", str(e), kind=classify_store_error(e))

    def list_products(self) -> list[ProductResponse]:
        """
        Get the whole catalog.

        Used to seed duplicate detection before an import batch.

        Raises:
            PersistenceError: If the store cannot be read
        """
        logger.debug("listing_catalog")

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .order("name")
                .execute()
            )
            return [ProductResponse(**row) for row in result.data]

        except Exception as e:
            logger.error(
                "list_products_failed",
                error=str(e),
                error_type=type(e).__name__
            )
            raise PersistenceError("select", str(e), kind=classify_store_error(e))

    def get_by_id(self, product_id: str) -> ProductResponse:
        """
        Get a single product by ID.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.debug("getting_product", product_id=product_id)

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .eq("id", product_id)
                .execute()
            )

            if not result.data:
                raise ProductNotFoundError(product_id)

            return ProductResponse(**result.data[0])

        except ProductNotFoundError:
            raise
        except Exception as e:
            logger.error(
                "get_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise PersistenceError("select", str(e), kind=classify_store_error(e))

    def get_by_part_number(self, part_number: str) -> Optional[ProductResponse]:
        """
        Get a product by part number.

        Matching is trimmed and case-insensitive, the same comparison the
        import duplicate check uses.

        Returns:
            ProductResponse or None if not found
        """
        logger.debug("getting_product_by_part_number", part_number=part_number)

        key = normalize_key(part_number)
        if key is None:
            return None

        try:
            result = (
                self.db.table(self.table)
                .select("*")
                .ilike("part_number", _escape_like(part_number.strip()))
                .execute()
            )

            for row in result.data or []:
                if normalize_key(row.get("part_number")) == key:
                    return ProductResponse(**row)

            return None

        except Exception as e:
            logger.error(
                "get_product_by_part_number_failed",
                part_number=part_number,
                error=str(e)
            )
            raise PersistenceError("select", str(e), kind=classify_store_error(e))

    # ===================
    # WRITE OPERATIONS
    # ===================

    def create_product(self, record: Mapping[str, Any]) -> ProductResponse:
        """
        Insert a candidate record as-is.

        No duplicate check here: the import pipeline has already done it
        against the catalog and the in-flight batch.

        Raises:
            PersistenceError: With kind CLIENT/TRANSIENT/UNKNOWN
        """
        row = record_to_row(record)

        try:
            result = (
                self.write_db.table(self.table)
                .insert(row)
                .execute()
            )

            product = ProductResponse(**result.data[0])

            logger.info(
                "product_created",
                product_id=product.id,
                part_number=product.part_number
            )

            return product

        except Exception as e:
            kind = classify_store_error(e)
            logger.error(
                "create_product_failed",
                part_number=row.get("part_number"),
                kind=kind.value,
                error=str(e)
            )
            raise PersistenceError("insert", str(e), kind=kind)

    def create(self, data: ProductCreate) -> ProductResponse:
        """
        Create a single product from the admin form.

        Raises:
            ProductPartNumberExistsError: If part number already exists
        """
        logger.info("creating_product", part_number=data.part_number)

        if self.get_by_part_number(data.part_number):
            raise ProductPartNumberExistsError(data.part_number)

        return self.create_product(data.to_record())

    def update(self, product_id: str, data: ProductUpdate) -> ProductResponse:
        """
        Update an existing product.

        Raises:
            ProductNotFoundError: If product doesn't exist
            ProductPartNumberExistsError: If new part number already exists
        """
        logger.info("updating_product", product_id=product_id)

        existing = self.get_by_id(product_id)

        if data.part_number and normalize_key(data.part_number) != normalize_key(existing.part_number):
            if self.get_by_part_number(data.part_number):
                raise ProductPartNumberExistsError(data.part_number)

        update_data = data.model_dump(exclude_none=True)
        if "category" in update_data:
            update_data["category"] = data.category.value

        if not update_data:
            return existing

        try:
            result = (
                self.write_db.table(self.table)
                .update(update_data)
                .eq("id", product_id)
                .execute()
            )

            product = ProductResponse(**result.data[0])

            logger.info(
                "product_updated",
                product_id=product_id,
                fields=list(update_data.keys())
            )

            return product

        except Exception as e:
            logger.error(
                "update_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise PersistenceError("update", str(e), kind=classify_store_error(e))

    def delete(self, product_id: str) -> bool:
        """
        Delete a product.

        Raises:
            ProductNotFoundError: If product doesn't exist
        """
        logger.info("deleting_product", product_id=product_id)

        self.get_by_id(product_id)

        try:
            self.write_db.table(self.table).delete().eq("id", product_id).execute()

            logger.info("product_deleted", product_id=product_id)

            return True

        except Exception as e:
            logger.error(
                "delete_product_failed",
                product_id=product_id,
                error=str(e)
            )
            raise PersistenceError("delete", str(e), kind=classify_store_error(e))


# Singleton instance for convenience
_product_service: Optional[ProductService] = None

def get_product_service() -> ProductService:
    """Get or create ProductService instance."""
    global _product_service
    if _product_service is None:
        _product_service = ProductService()
    return _product_service
