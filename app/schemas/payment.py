"""Payment reference API schemas (IBAN validation, QR references)."""

from pydantic import BaseModel, Field

from app.domain.enums import QRReferenceType


class IBANValidateRequest(BaseModel):
    """Request body for POST /payments/iban/validate (spaces and punctuation allowed)."""

    iban: str = Field(..., max_length=64)


class IBANValidationResponse(BaseModel):
    """Structured IBAN validation result."""

    is_valid: bool
    cleaned_iban: str
    formatted_iban: str
    country_code: str
    is_qr_iban: bool
    error: str | None = None
    iban_for_qr: str = Field(
        ..., description="IBAN to print on a QR-bill (suffix stripped for 22-char Swiss IBANs)"
    )
    reference_type: QRReferenceType


class QRReferenceRequest(BaseModel):
    """Request body for POST /payments/qr-reference."""

    invoice_number: str = Field(..., max_length=128)


class QRReferenceResponse(BaseModel):
    """Generated QR reference, compact and grouped by 5."""

    reference: str
    formatted_reference: str


class QRReferenceValidateRequest(BaseModel):
    """Request body for POST /payments/qr-reference/validate."""

    reference: str = Field(..., max_length=64)


class QRReferenceValidateResponse(BaseModel):
    reference: str
    is_valid: bool
