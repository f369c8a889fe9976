"""Payments API: IBAN validation and Swiss QR references. Pure computation; no tenant data."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_current_user, get_iban_policy
from app.application.dtos.user import AuthenticatedUser
from app.application.services.payment_reference import (
    IBANPolicy,
    format_qr_reference,
    generate_qr_reference,
    get_iban_for_qr,
    get_qr_reference_type,
    validate_iban,
    validate_qr_reference,
)
from app.schemas.payment import (
    IBANValidateRequest,
    IBANValidationResponse,
    QRReferenceRequest,
    QRReferenceResponse,
    QRReferenceValidateRequest,
    QRReferenceValidateResponse,
)

router = APIRouter()


@router.post("/iban/validate", response_model=IBANValidationResponse)
async def validate_iban_endpoint(
    body: IBANValidateRequest,
    _: Annotated[AuthenticatedUser, Depends(get_current_user)],
    policy: Annotated[IBANPolicy, Depends(get_iban_policy)],
):
    """Validate an IBAN; invalid input is a 200 with is_valid false and an error message."""
    result = validate_iban(body.iban, policy)
    return IBANValidationResponse(
        is_valid=result.is_valid,
        cleaned_iban=result.cleaned_iban,
        formatted_iban=result.formatted_iban,
        country_code=result.country_code,
        is_qr_iban=result.is_qr_iban,
        error=result.error,
        iban_for_qr=get_iban_for_qr(body.iban),
        reference_type=get_qr_reference_type(body.iban),
    )


@router.post("/qr-reference", response_model=QRReferenceResponse)
async def generate_qr_reference_endpoint(
    body: QRReferenceRequest,
    _: Annotated[AuthenticatedUser, Depends(get_current_user)],
):
    """27-digit QR reference for an invoice number."""
    reference = generate_qr_reference(body.invoice_number)
    return QRReferenceResponse(
        reference=reference, formatted_reference=format_qr_reference(reference)
    )


@router.post("/qr-reference/validate", response_model=QRReferenceValidateResponse)
async def validate_qr_reference_endpoint(
    body: QRReferenceValidateRequest,
    _: Annotated[AuthenticatedUser, Depends(get_current_user)],
):
    """Check length, digits and check digit of a QR reference."""
    return QRReferenceValidateResponse(
        reference=body.reference, is_valid=validate_qr_reference(body.reference)
    )
