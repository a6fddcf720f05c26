"""Invoice download and sharing endpoints."""

from fastapi import APIRouter, HTTPException, Response

from quickinvoice.api.v1.dependencies import InvoiceServiceDep, Now, UlidPath
from quickinvoice.api.v1.orders.schemas import ShareLinkResponse
from quickinvoice.services.invoices.exceptions import RenderError
from quickinvoice.services.orders.exceptions import OrderNotFound
from quickinvoice.services.sellers.exceptions import SellerNotFound

router = APIRouter(tags=["invoices"])


@router.get(
    "/sellers/{seller_id}/orders/{order_id}/invoice",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
    operation_id="getInvoicePdf",
)
async def get_invoice(seller_id: UlidPath, order_id: UlidPath, service: InvoiceServiceDep, now: Now) -> Response:
    """Render the order's invoice as a PDF download.

    ``X-Invoice-Warnings`` carries the number of total mismatches found
    between the stored totals and the items.
    """
    try:
        result = await service.render_invoice(seller_id, order_id, rendered_at=now)
    except SellerNotFound:
        raise HTTPException(status_code=404, detail="Seller not found")
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="Order not found")
    except RenderError as e:
        raise HTTPException(status_code=422, detail=str(e))

    invoice = result.invoice
    return Response(
        content=invoice.content,
        media_type=invoice.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{invoice.filename}"',
            "X-Invoice-Warnings": str(len(result.warnings)),
        },
    )


@router.get(
    "/sellers/{seller_id}/orders/{order_id}/share",
    response_model=ShareLinkResponse,
    operation_id="getInvoiceShareLink",
)
async def get_share_link(
    seller_id: UlidPath,
    order_id: UlidPath,
    service: InvoiceServiceDep,
    now: Now,
) -> ShareLinkResponse:
    """Build the customer message and a WhatsApp link that pre-fills it."""
    try:
        link = await service.share_invoice(seller_id, order_id, rendered_at=now)
    except SellerNotFound:
        raise HTTPException(status_code=404, detail="Seller not found")
    except OrderNotFound:
        raise HTTPException(status_code=404, detail="Order not found")
    return ShareLinkResponse(message=link.message, contact_link=link.contact_link)
