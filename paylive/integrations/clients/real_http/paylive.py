"""
Real PayLIVE SOAP client.

Used when merchant credentials and the PayLIVE endpoint are configured.
Each gateway operation is one SOAP 1.1 POST; nothing is retried.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union

import httpx

from paylive.integrations.contracts.interfaces import (
    MobilePaymentOrderResponse,
    OrderItem,
    PaymentGateway,
    PaymentHeader,
    PaymentOrder,
    TokenIssuance,
    VerifyMobilePaymentResponse,
)
from paylive.integrations.policy.response_wrappers import (
    GatewayFault,
    IntegrationResponseError,
    normalize_mobile_payment_order_response,
    normalize_result_code,
    normalize_verify_mobile_payment_response,
)
from paylive.utils.config_loader import PayliveSettings

logger = logging.getLogger(__name__)

SOAP_ENV_NS = "http://schemas.xmlsoap.org/soap/envelope/"

ET.register_namespace("soap", SOAP_ENV_NS)

FieldValue = Union[str, int, bool, Decimal, ET.Element, None]


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        return format(value, "f")
    return "" if value is None else str(value)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


class SoapPayliveGateway(PaymentGateway):
    def __init__(
        self,
        settings: PayliveSettings,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.endpoint_url = settings.endpoint_url
        self.namespace = settings.namespace.rstrip("/")
        self.timeout_seconds = settings.timeout_seconds
        self._supports_cancellation = settings.supports_cancellation
        self._transport = transport

    @property
    def supports_cancellation(self) -> bool:
        return self._supports_cancellation

    # ------------------------------------------------------------------
    # Envelope building
    # ------------------------------------------------------------------

    def _qname(self, name: str) -> str:
        return f"{{{self.namespace}}}{name}"

    def _header_element(self, header: PaymentHeader) -> ET.Element:
        element = ET.Element(self._qname("PaymentHeader"))
        for name, value in (
            ("APIVersion", header.api_version),
            ("MerchantEmail", header.merchant_email),
            ("MerchantKey", header.merchant_key),
            ("SvcType", header.service_type),
            ("UseIntMode", header.integration_mode),
        ):
            ET.SubElement(element, self._qname(name)).text = _format_value(value)
        return element

    def _items_element(self, items: Tuple[OrderItem, ...]) -> ET.Element:
        container = ET.Element(self._qname("orderItems"))
        for item in items:
            entry = ET.SubElement(container, self._qname("OrderItem"))
            for name, value in (
                ("ItemCode", item.item_code),
                ("ItemName", item.item_name),
                ("UnitPrice", item.unit_price),
                ("Quantity", item.quantity),
                ("SubTotal", item.sub_total),
            ):
                ET.SubElement(entry, self._qname(name)).text = _format_value(value)
        return container

    def _order_fields(self, order: PaymentOrder) -> List[Tuple[str, FieldValue]]:
        fields: List[Tuple[str, FieldValue]] = [("orderId", order.order_id)]
        # absent amounts are left out of the envelope entirely
        fields.extend((name, money.amount) for name, money in order.amounts.as_pairs() if money.present)
        fields.append(("comment1", order.comment1))
        fields.append(("comment2", order.comment2))
        fields.append(("orderItems", self._items_element(order.items)))
        return fields

    def build_envelope(self, operation: str, header: PaymentHeader, fields: List[Tuple[str, FieldValue]]) -> bytes:
        envelope = ET.Element(f"{{{SOAP_ENV_NS}}}Envelope")
        soap_header = ET.SubElement(envelope, f"{{{SOAP_ENV_NS}}}Header")
        soap_header.append(self._header_element(header))
        body = ET.SubElement(envelope, f"{{{SOAP_ENV_NS}}}Body")
        call = ET.SubElement(body, self._qname(operation))
        for name, value in fields:
            if isinstance(value, ET.Element):
                call.append(value)
            else:
                ET.SubElement(call, self._qname(name)).text = _format_value(value)
        return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _call(self, operation: str, header: PaymentHeader, fields: List[Tuple[str, FieldValue]]) -> ET.Element:
        """POST one SOAP request and return the <operation>Result element."""
        payload = self.build_envelope(operation, header, fields)
        headers = {
            "Content-Type": "text/xml; charset=utf-8",
            "SOAPAction": f'"{self.namespace}/{operation}"',
        }

        logger.debug("PayLIVE %s -> %s", operation, self.endpoint_url)
        with httpx.Client(timeout=self.timeout_seconds, transport=self._transport) as client:
            response = client.post(self.endpoint_url, content=payload, headers=headers)

        root = self._parse(response)
        body = next((child for child in root if _local_name(child.tag) == "Body"), None)
        if body is None:
            raise IntegrationResponseError(f"{operation}: SOAP response has no Body")

        fault = next((child for child in body if _local_name(child.tag) == "Fault"), None)
        if fault is not None:
            fault_fields = self._element_to_dict(fault)
            raise GatewayFault(
                str(fault_fields.get("faultstring", "")),
                fault_code=str(fault_fields.get("faultcode", "")),
                payload=fault_fields,
            )
        response.raise_for_status()

        result_tag = f"{operation}Result"
        for element in body.iter():
            if _local_name(element.tag) == result_tag:
                return element
        raise IntegrationResponseError(f"{operation}: missing {result_tag} in SOAP response")

    @staticmethod
    def _parse(response: httpx.Response) -> ET.Element:
        try:
            return ET.fromstring(response.content)
        except ET.ParseError as exc:
            # not SOAP at all; surface the HTTP error first if there is one
            response.raise_for_status()
            raise IntegrationResponseError(f"Unparseable SOAP response: {exc}") from exc

    @staticmethod
    def _element_to_dict(element: ET.Element) -> Dict[str, Any]:
        return {_local_name(child.tag): (child.text or "").strip() for child in element}

    @staticmethod
    def _text(element: ET.Element, operation: str) -> str:
        text = (element.text or "").strip()
        if not text:
            raise IntegrationResponseError(f"{operation}: empty result")
        return text

    # ------------------------------------------------------------------
    # Token path
    # ------------------------------------------------------------------

    def mobile_payment_order(self, header: PaymentHeader, order: PaymentOrder) -> MobilePaymentOrderResponse:
        result = self._call("mobilePaymentOrder", header, self._order_fields(order))
        return normalize_mobile_payment_order_response(self._element_to_dict(result))

    def verify_mobile_payment(self, header: PaymentHeader, order_id: str) -> VerifyMobilePaymentResponse:
        result = self._call("verifyMobilePayment", header, [("orderId", order_id)])
        return normalize_verify_mobile_payment_response(self._element_to_dict(result), fallback_order_id=order_id)

    def process_payment_order(self, header: PaymentHeader, order: PaymentOrder) -> TokenIssuance:
        try:
            result = self._call("ProcessPaymentOrder", header, self._order_fields(order))
        except GatewayFault as fault:
            return TokenIssuance.failure(fault.fault_string)
        return TokenIssuance.success(self._text(result, "ProcessPaymentOrder"))

    def confirm_transaction(self, header: PaymentHeader, token: str, transaction_id: str) -> int:
        result = self._call("ConfirmTransaction", header, [("token", token), ("transactionId", transaction_id)])
        return normalize_result_code(result.text)

    def cancel_transaction(self, header: PaymentHeader, token: str, transaction_id: str) -> int:
        result = self._call("CancelTransaction", header, [("token", token), ("transactionId", transaction_id)])
        return normalize_result_code(result.text)

    # ------------------------------------------------------------------
    # Code path
    # ------------------------------------------------------------------

    def generate_payment_code(
        self,
        header: PaymentHeader,
        order: PaymentOrder,
        payer: str,
        mobile: str,
        provider: str,
        provider_type: str,
    ) -> str:
        fields = self._order_fields(order)
        fields.extend([
            ("payer", payer),
            ("mobile", mobile),
            ("provider", provider),
            ("providerType", provider_type),
        ])
        result = self._call("generatePaymentCode", header, fields)
        return self._text(result, "generatePaymentCode")

    def check_payment_status(self, header: PaymentHeader, order_id: str, provider: str, provider_type: str) -> str:
        result = self._call(
            "checkPaymentStatus",
            header,
            [("orderId", order_id), ("provider", provider), ("providerType", provider_type)],
        )
        return self._text(result, "checkPaymentStatus")
