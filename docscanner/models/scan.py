"""
Request and response models for the OCR scan endpoints, plus the mapper
that turns the server's JSON body into a ScanDocumentResponse.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional


SUCCESS_CODE = "0000"

# Wire name -> attribute name for the optional OCR fields of a response
RESPONSE_OCR_FIELDS = {
    "ocrNumber": "ocr_number",
    "ocrBirthDay": "ocr_birth_day",
    "ocrName": "ocr_name",
    "ocrExpireDate": "ocr_expire_date",
    "ocrAddress": "ocr_address",
    "ocrReserved": "ocr_reserved_field",
    "ocrImage": "ocr_masked_image",
}

# Attribute name -> wire name for the OCR fields sent to /ocr/save
SAVE_OCR_FIELDS = {
    "ocr_number": "ocrNumber",
    "ocr_birth_day": "ocrBirthDay",
    "ocr_name": "ocrName",
    "ocr_expire_date": "ocrExpireDate",
    "ocr_address": "ocrAddress",
    "ocr_reserved": "ocrReserved",
}


@dataclass(frozen=True)
class ScanDocumentResponse:
    response_code: Optional[str]
    response_message: Optional[str]
    ocr_number: Optional[str] = None
    ocr_birth_day: Optional[str] = None    # YYYYMMDD
    ocr_name: Optional[str] = None
    ocr_expire_date: Optional[str] = None
    ocr_address: Optional[str] = None
    ocr_reserved_field: Optional[str] = None
    ocr_masked_image: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.response_code == SUCCESS_CODE

    def ocr_fields(self) -> Dict[str, str]:
        """OCR attributes that are present, keyed by attribute name."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name.startswith("ocr_") and getattr(self, f.name) is not None
        }


@dataclass(frozen=True)
class ScanDocumentRequest:
    user_id: str
    document_type_id: str
    country_code: Optional[str] = None

    def form_fields(self) -> Dict[str, str]:
        data = {"mbUid": self.user_id, "ocrType": self.document_type_id}
        if self.country_code:
            data["countryCode"] = self.country_code
        return data


@dataclass(frozen=True)
class SaveOcrRequest:
    """OCR values (possibly corrected by the user) to persist on the server."""
    user_id: str
    document_type_id: str
    country_code: Optional[str] = None
    ocr_number: Optional[str] = None
    ocr_birth_day: Optional[str] = None
    ocr_name: Optional[str] = None
    ocr_expire_date: Optional[str] = None
    ocr_address: Optional[str] = None
    ocr_reserved: Optional[str] = None

    @classmethod
    def from_response(cls, response: ScanDocumentResponse, user_id: str,
                      document_type_id: str, country_code: Optional[str] = None,
                      **overrides) -> "SaveOcrRequest":
        """Seed a save request from a scan result; keyword overrides win."""
        values = dict(
            ocr_number=response.ocr_number,
            ocr_birth_day=response.ocr_birth_day,
            ocr_name=response.ocr_name,
            ocr_expire_date=response.ocr_expire_date,
            ocr_address=response.ocr_address,
            ocr_reserved=response.ocr_reserved_field,
        )
        values.update(overrides)
        return cls(user_id=user_id, document_type_id=document_type_id,
                   country_code=country_code, **values)

    def form_fields(self) -> Dict[str, str]:
        data = ScanDocumentRequest(
            self.user_id, self.document_type_id, self.country_code
        ).form_fields()
        for attr, wire_name in SAVE_OCR_FIELDS.items():
            value = getattr(self, attr)
            if value:
                data[wire_name] = value
        return data


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def map_scan_response(payload: Dict[str, Any]) -> ScanDocumentResponse:
    """
    Copy a decoded response body into a ScanDocumentResponse.

    Absent or null fields become None; present values are kept as sent.
    Raises TypeError when the payload is not a JSON object.
    """
    if not isinstance(payload, dict):
        raise TypeError(f"Expected a JSON object, got {type(payload).__name__}")

    ocr_values = {
        attr: _optional_str(payload.get(wire_name))
        for wire_name, attr in RESPONSE_OCR_FIELDS.items()
    }
    return ScanDocumentResponse(
        response_code=_optional_str(payload.get("resCd")),
        response_message=_optional_str(payload.get("resMsg")),
        **ocr_values,
    )
