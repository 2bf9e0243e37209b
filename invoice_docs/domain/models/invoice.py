from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Dates stay loosely typed on input; the date formatter parses them at layout
# time and fails the whole request on anything unparseable.
DateInput = Union[date, datetime, str]


class LineItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    particulars: str
    hsn_code: Optional[str] = None
    qty_dispatched: int = Field(gt=0)
    basic_amount: Decimal = Field(ge=0)
    line_total: Decimal = Field(ge=0)


class PurchaseOrderRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    po_number: str = Field(min_length=1)
    po_date: Optional[DateInput] = None


class Invoice(BaseModel):
    model_config = ConfigDict(frozen=True)

    invoice_number: str = Field(min_length=1)
    invoice_date: DateInput
    due_date: DateInput
    purchase_order: Optional[PurchaseOrderRef] = None
    vendor_name: str
    gst_percent: Decimal = Field(default=Decimal("0"), ge=0, le=100)

    # Emptiness is a LayoutError, not a validation error
    line_items: tuple[LineItem, ...] = ()

    transportation_cost: Optional[Decimal] = Field(default=None, ge=0)
    total_cost: Decimal = Field(ge=0)
    pending_amount: Decimal = Field(default=Decimal("0"), ge=0)


class IssuerProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    organization_name: Optional[str] = None
    organization_address: Optional[str] = None
    organization_phone: Optional[str] = None
    organization_email: Optional[str] = None
    organization_gst_tin: Optional[str] = None

    # Bank / payment
    bank_name: Optional[str] = None
    account_name: Optional[str] = None
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    upi_id: Optional[str] = None

    @property
    def has_payment_details(self) -> bool:
        return any(
            (v or "").strip()
            for v in (
                self.bank_name,
                self.account_name,
                self.account_number,
                self.ifsc_code,
                self.upi_id,
            )
        )
