from __future__ import annotations

from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, ValidationError

from paylive.integrations.contracts.interfaces import MobilePaymentOrderResponse, VerifyMobilePaymentResponse
from paylive.integrations.contracts.payments import PaymentCallback


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


class GatewayFault(IntegrationResponseError):
    """The gateway itself reported a failure. fault_string is passed through verbatim."""

    def __init__(
        self,
        fault_string: str,
        *,
        fault_code: str = "",
        payload: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(fault_string, payload=payload)
        self.fault_code = fault_code
        self.fault_string = fault_string


class MobilePaymentOrderModel(BaseModel):
    token: str = Field(min_length=1)
    qr_code_url: str
    payment_order_code: str = Field(min_length=1)
    raw: Dict[str, Any] = Field(default_factory=dict)

    def to_contract(self) -> MobilePaymentOrderResponse:
        return MobilePaymentOrderResponse(
            token=self.token,
            qr_code_url=self.qr_code_url,
            payment_order_code=self.payment_order_code,
            raw=self.raw,
        )


class VerifyMobilePaymentModel(BaseModel):
    order_id: str
    status: str = Field(min_length=1)
    transaction_id: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)

    def to_contract(self) -> VerifyMobilePaymentResponse:
        return VerifyMobilePaymentResponse(
            order_id=self.order_id,
            status=self.status,
            transaction_id=self.transaction_id,
            raw=self.raw,
        )


class PaymentCallbackModel(BaseModel):
    status: str = Field(min_length=1)
    order_id: str = Field(min_length=1)
    token: Optional[str] = None
    transaction_id: Optional[str] = None
    raw: Dict[str, Any] = Field(default_factory=dict)

    def to_contract(self) -> PaymentCallback:
        return PaymentCallback(
            status=self.status,
            order_id=self.order_id,
            token=self.token,
            transaction_id=self.transaction_id,
            raw=self.raw,
        )


def normalize_mobile_payment_order_response(raw: Dict[str, Any]) -> MobilePaymentOrderResponse:
    token = _first_non_empty(raw, "token", "Token", "paymentToken", "PaymentToken")
    qr_code_url = str(_first_non_empty(raw, "qrCodeUrl", "QrCodeUrl", "qrCodeURL", "QRCodeUrl", "qr_code_url"))
    order_code = _first_non_empty(raw, "paymentOrderCode", "PaymentOrderCode", "orderCode", "payment_order_code")

    if not _is_http_url(qr_code_url):
        raise IntegrationResponseError(f"Invalid QR code URL '{qr_code_url}'.", payload=raw)

    model = _build_model(
        MobilePaymentOrderModel,
        {
            "token": str(token).strip(),
            "qr_code_url": qr_code_url.strip(),
            "payment_order_code": str(order_code).strip(),
            "raw": raw,
        },
        raw,
    )
    return model.to_contract()


def normalize_verify_mobile_payment_response(
    raw: Dict[str, Any],
    *,
    fallback_order_id: str,
) -> VerifyMobilePaymentResponse:
    order_id = str(_first_non_empty(raw, "orderId", "OrderId", "order_id", default=fallback_order_id))
    status = str(_first_non_empty(raw, "status", "Status", "paymentStatus", "PaymentStatus"))
    transaction_id = _first_non_empty(
        raw, "transactionId", "TransactionId", "transaction_id", "transac_id", default=""
    )

    model = _build_model(
        VerifyMobilePaymentModel,
        {
            "order_id": order_id,
            "status": status.strip(),
            "transaction_id": str(transaction_id) or None,
            "raw": raw,
        },
        raw,
    )
    return model.to_contract()


def normalize_result_code(raw_value: Any) -> int:
    if isinstance(raw_value, bool):
        raise IntegrationResponseError(f"Invalid result code: {raw_value!r}")
    try:
        return int(str(raw_value).strip())
    except (TypeError, ValueError) as exc:
        raise IntegrationResponseError(f"Invalid result code: {raw_value!r}") from exc


def normalize_callback(params: Mapping[str, Any]) -> PaymentCallback:
    raw = dict(params)
    status = _first_non_empty(raw, "status", "Status")
    order_id = _first_non_empty(raw, "cust_ref", "order_id", "orderId", "OrderId")
    token = _first_non_empty(raw, "pay_token", "token", "Token", default="")
    transaction_id = _first_non_empty(raw, "transac_id", "transaction_id", "transactionId", default="")

    model = _build_model(
        PaymentCallbackModel,
        {
            "status": str(status).strip(),
            "order_id": str(order_id).strip(),
            "token": str(token) or None,
            "transaction_id": str(transaction_id) or None,
            "raw": raw,
        },
        raw,
    )
    return model.to_contract()


def _first_non_empty(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    if default is not None:
        return default
    raise IntegrationResponseError(f"Missing required field. Checked keys: {', '.join(keys)}", payload=data)


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value.strip())
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def _build_model(model_type, payload: Dict[str, Any], raw: Dict[str, Any]):
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(f"Response validation failed: {exc}", payload=raw) from exc
