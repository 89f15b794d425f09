"""Invoice data models.

Field names follow the stored invoice document (camelCase keys such as
``unitPrice``, ``vatPercentage`` and ``extraDeliverables``); snake_case names
are accepted as well. Numeric inputs are kept as the raw strings the user
typed, computed money fields as fixed two-decimal strings.
"""

from decimal import Decimal
from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


def _raw_number(value: Any) -> Any:
    """Keep numeric inputs as strings so malformed values survive validation."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float | Decimal):
        return str(value)
    return str(value)


def _default_on(value: Any) -> Any:
    """Treat a missing toggle as switched on."""
    return True if value is None else value


def _default_off(value: Any) -> Any:
    return False if value is None else value


RawNumber = Annotated[str | None, BeforeValidator(_raw_number)]
ToggleOn = Annotated[bool, BeforeValidator(_default_on)]
ToggleOff = Annotated[bool, BeforeValidator(_default_off)]


class DocumentModel(BaseModel):
    """Base for models read from stored invoice documents."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ExtraDeliverableColumnToggles(DocumentModel):
    """Per-extra column visibility. Every column is visible unless switched off."""

    name: ToggleOn = True
    service_type: ToggleOn = True
    amount: ToggleOn = True
    vat_percentage: ToggleOn = True
    vat: ToggleOn = True


class ExtraDeliverable(DocumentModel):
    """Additional billable sub-charge attached to a line item.

    Attributes:
        amount: Charge amount as entered (may legitimately be "0")
        vat_percentage: VAT rate in percent as entered
        vat: Computed VAT amount (two-decimal string)
        show_vat: Include this VAT in the displayed VAT row (display only)
        show_columns: Which columns this extra shows when rendered
        row_name: Label printed in the passenger-name column
        name: Description printed in the route column
        service_type: Type of service
    """

    amount: RawNumber = None
    vat_percentage: RawNumber = None
    vat: RawNumber = "0.00"
    show_vat: ToggleOff = False
    show_columns: ExtraDeliverableColumnToggles = Field(
        default_factory=ExtraDeliverableColumnToggles
    )
    row_name: str | None = None
    name: str | None = None
    service_type: str | None = None

    @field_validator("show_columns", mode="before")
    @classmethod
    def _default_columns(cls, value: Any) -> Any:
        return {} if value is None else value

    @classmethod
    def blank(cls) -> "ExtraDeliverable":
        """New extra as added from the invoice form."""
        return cls(name="", row_name="", service_type="", amount="0", vat_percentage="")


class LineItem(DocumentModel):
    """One billable row of an invoice (one passenger or service).

    ``rate`` is stored under the document key ``unitPrice`` and the line VAT
    amount under ``vat``.
    """

    passenger_name: str | None = None
    name: str | None = Field(default=None, description="Airline")
    description: str | None = Field(default=None, description="Route")
    service_type: str | None = None

    rate: RawNumber = Field(default=None, alias="unitPrice")
    vat_percentage: RawNumber = None
    vat_amount: RawNumber = Field(default="0.00", alias="vat")
    total: RawNumber = "0.00"
    quantity: int = 1

    extra_deliverables: list[ExtraDeliverable] = Field(default_factory=list)

    @field_validator("quantity", mode="before")
    @classmethod
    def _single_unit(cls, value: Any) -> int:
        # Each line bills exactly one passenger
        return 1

    @field_validator("extra_deliverables", mode="before")
    @classmethod
    def _default_extras(cls, value: Any) -> Any:
        return [] if value is None else value


class ChargeSetting(DocumentModel):
    """Invoice-level adjustment (discount, tax or shipping).

    Shipping documents use ``cost``/``costType`` instead of ``amount``/``amountType``.
    """

    amount: RawNumber = Field(
        default=None, validation_alias=AliasChoices("amount", "cost")
    )
    amount_type: Literal["amount", "percentage"] = Field(
        default="amount",
        validation_alias=AliasChoices("amountType", "amount_type", "costType", "cost_type"),
    )

    @field_validator("amount_type", mode="before")
    @classmethod
    def _normalise_type(cls, value: Any) -> str:
        if value is None or value == "" or value == "amount":
            return "amount"
        return "percentage"


class ColumnNames(DocumentModel):
    """Display names for the invoice item columns."""

    passenger_name: str = "Passenger Name"
    route: str = "Route"
    airlines: str = "Airlines"
    service_type: str = "Type of Service"
    amount: str = "Amount"


class ExtraDeliverableColumnNames(DocumentModel):
    """Display names for the extra deliverable columns."""

    name: str = "Extra Deliverable"
    service_type: str = "Type of Service"
    amount: str = "Amount"
    vat_percentage: str = "VAT %"
    vat: str = "VAT Amount"


# Keys of an invoice document's ``details`` block read by Invoice
_DETAIL_KEYS = {
    "items",
    "currency",
    "invoiceNumber",
    "invoiceDate",
    "subTotal",
    "totalAmount",
    "totalAmountInWords",
    "discountDetails",
    "taxDetails",
    "shippingDetails",
    "columnNames",
    "extraDeliverableColumnNames",
    "showPassengerName",
    "showRoute",
    "showAirlines",
    "showServiceType",
    "showAmount",
    "showVat",
}


class Invoice(DocumentModel):
    """An invoice as stored by the persistence layer.

    Only the fields read or derived by the core are modelled. A document that
    nests these under ``details`` (alongside ``sender``/``receiver``) is
    flattened on validation.
    """

    invoice_number: str | None = None
    invoice_date: str | None = None
    currency: str | None = None

    items: list[LineItem] = Field(default_factory=lambda: [LineItem()])

    sub_total: RawNumber = "0.00"
    total_amount: RawNumber = "0.00"
    total_amount_in_words: str | None = None

    discount_details: ChargeSetting = Field(default_factory=ChargeSetting)
    tax_details: ChargeSetting = Field(default_factory=ChargeSetting)
    shipping_details: ChargeSetting = Field(default_factory=ChargeSetting)

    column_names: ColumnNames = Field(default_factory=ColumnNames)
    extra_deliverable_column_names: ExtraDeliverableColumnNames = Field(
        default_factory=ExtraDeliverableColumnNames
    )

    show_passenger_name: ToggleOn = True
    show_route: ToggleOn = True
    show_airlines: ToggleOn = True
    show_service_type: ToggleOn = True
    show_amount: ToggleOn = True
    show_vat: ToggleOff = False

    @model_validator(mode="before")
    @classmethod
    def _flatten_details(cls, data: Any) -> Any:
        if not isinstance(data, dict) or not isinstance(data.get("details"), dict):
            return data
        flattened = {k: v for k, v in data.items() if k != "details"}
        for key, value in data["details"].items():
            if key in _DETAIL_KEYS:
                flattened.setdefault(key, value)
        return flattened

    @field_validator("invoice_number", "invoice_date", mode="before")
    @classmethod
    def _to_string(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if hasattr(value, "isoformat"):
            return value.isoformat()
        return str(value)

    @field_validator(
        "discount_details",
        "tax_details",
        "shipping_details",
        "column_names",
        "extra_deliverable_column_names",
        mode="before",
    )
    @classmethod
    def _default_block(cls, value: Any) -> Any:
        return {} if value is None else value
