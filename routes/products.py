"""
Product API routes.

Reads go through the configured catalog (Supabase or fixture); single
product writes go to Supabase; bulk imports go through the import service.
"""

from fastapi import APIRouter, Query, UploadFile, File
from fastapi.responses import JSONResponse, Response
from fastapi.concurrency import run_in_threadpool
from typing import Optional
from io import BytesIO
import structlog

from models.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    Category,
)
from models.product_import import ProductImportRequest, ImportResult
from services.catalog import get_catalog
from services.product_service import get_product_service
from services.import_service import get_import_service
from services.refresh_events import get_refresh_events
from parsers.product_sheet_parser import parse_product_sheet, build_template_workbook
from exceptions import (
    AppError,
    ProductNotFoundError,
    ProductPartNumberExistsError,
    ProductSheetParseError,
)

logger = structlog.get_logger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    # Unexpected error
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# IMPORT ROUTES
# ===================

@router.post("/import", response_model=ImportResult)
async def import_products(data: ProductImportRequest):
    """
    Import already-parsed product records.

    Always returns 200 with a per-row report; rejected rows are listed in
    ``failed`` with their original index.
    """
    try:
        service = get_import_service()
        return await run_in_threadpool(service.import_batch, data.products)

    except Exception as e:
        return handle_error(e)


@router.post("/import/upload", response_model=ImportResult)
async def upload_products(file: UploadFile = File(...)):
    """
    Import products from an Excel (.xlsx/.xls) or CSV file.

    The first sheet is read; headers follow the import template.

    Raises:
        422: Unsupported or unreadable file, or no rows found
    """
    logger.info(
        "product_upload_started",
        filename=file.filename,
        content_type=file.content_type
    )

    try:
        content = await file.read()
        sheet = parse_product_sheet(BytesIO(content), filename=file.filename)

        if not sheet.has_data:
            raise ProductSheetParseError(
                message="No valid products found in the file",
                details={"filename": file.filename}
            )

        service = get_import_service()
        result = await run_in_threadpool(service.import_batch, sheet.records)

        logger.info(
            "product_upload_completed",
            filename=file.filename,
            successful=result.success_count,
            failed=result.failure_count
        )

        return result

    except Exception as e:
        return handle_error(e)


@router.get("/import/template")
async def download_import_template():
    """Download an .xlsx template with sample rows."""
    try:
        content = build_template_workbook()
        return Response(
            content=content,
            media_type=XLSX_MEDIA_TYPE,
            headers={
                "Content-Disposition": 'attachment; filename="product_import_template.xlsx"'
            }
        )

    except Exception as e:
        return handle_error(e)


# ===================
# ROUTES
# ===================

@router.get("", response_model=ProductListResponse)
async def list_products(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(20, ge=1, le=100, description="Items per page"),
    category: Optional[Category] = Query(None, description="Filter by category"),
    search: Optional[str] = Query(None, description="Match name, model or part number"),
    min_price: Optional[float] = Query(None, ge=0, description="Minimum price"),
    max_price: Optional[float] = Query(None, ge=0, description="Maximum price")
):
    """
    List products with optional filters.

    Returns paginated list of products.
    """
    try:
        catalog = get_catalog()

        products, total = catalog.get_all(
            page=page,
            page_size=page_size,
            category=category,
            search=search,
            min_price=min_price,
            max_price=max_price
        )

        total_pages = (total + page_size - 1) // page_size

        return ProductListResponse(
            data=products,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages
        )

    except Exception as e:
        return handle_error(e)


@router.get("/part-number/{part_number}", response_model=ProductResponse)
async def get_product_by_part_number(part_number: str):
    """
    Get a product by part number.

    Raises:
        404: Product not found
    """
    try:
        service = get_product_service()
        product = service.get_by_part_number(part_number)

        if not product:
            raise ProductNotFoundError(part_number)

        return product

    except Exception as e:
        return handle_error(e)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str):
    """
    Get a single product by ID.

    Raises:
        404: Product not found
    """
    try:
        return get_catalog().get_by_id(product_id)

    except Exception as e:
        return handle_error(e)


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(data: ProductCreate):
    """
    Create a new product.

    Raises:
        409: Part number already exists
        422: Validation error
    """
    try:
        service = get_product_service()
        product = service.create(data)
        get_refresh_events().emit("create", count=1, product_ids=[product.id])
        return product

    except ProductPartNumberExistsError as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(product_id: str, data: ProductUpdate):
    """
    Update an existing product.

    Only provided fields are updated.

    Raises:
        404: Product not found
        409: New part number already exists
        422: Validation error
    """
    try:
        service = get_product_service()
        product = service.update(product_id, data)
        get_refresh_events().emit("update", count=1, product_ids=[product_id])
        return product

    except (ProductNotFoundError, ProductPartNumberExistsError) as e:
        return handle_error(e)
    except Exception as e:
        return handle_error(e)


@router.delete("/{product_id}", status_code=204)
async def delete_product(product_id: str):
    """
    Delete a product.

    Raises:
        404: Product not found
    """
    try:
        service = get_product_service()
        service.delete(product_id)
        get_refresh_events().emit("delete", count=1, product_ids=[product_id])
        return Response(status_code=204)

    except Exception as e:
        return handle_error(e)
