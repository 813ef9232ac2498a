#!/usr/bin/env python3
"""
Run both PayLIVE order lifecycles against the mock gateway and print each stage.

- token path: mobile payment order -> status -> payer pays -> confirm -> cancel attempt
- code path:  payment code (mobile money) -> status -> payer pays -> status

Usage (from repo root):
  python scripts/run_payment_demo.py
  python scripts/run_payment_demo.py --order-id ORD-42 --provider MTN
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, is_dataclass
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from paylive import OrderItem, PayliveConnector, PayliveMockGateway, ProviderType


def setup_logging(verbose: bool):
    """Log to terminal so every gateway call is visible."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stdout,
    )


def print_stage(title: str, data):
    """Print a stage header and data to the terminal."""
    print("\n" + "=" * 60)
    print(f"  {title}")
    print("=" * 60)
    if is_dataclass(data):
        data = asdict(data)
    if isinstance(data, (dict, list)):
        print(json.dumps(data, indent=2, default=str))
    else:
        print(data)
    print()


def parse_args():
    parser = argparse.ArgumentParser(description="PayLIVE order lifecycle demo (mock gateway)")
    parser.add_argument("--order-id", default="ORD-1")
    parser.add_argument("--provider", default="MTN")
    parser.add_argument("--mobile", default="0244000000")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args()


def main():
    args = parse_args()
    setup_logging(args.verbose)

    gateway = PayliveMockGateway()
    connector = PayliveConnector.from_credentials(
        api_version="1.4",
        merchant_email="merchant@example.com",
        merchant_key="demo-merchant-key",
        integration_mode=True,
        gateway=gateway,
    )
    items = [OrderItem("SKU-1", "Widget", Decimal("100.00"), 1)]

    # --- Token path ---
    order = connector.issue_mobile_payment(
        args.order_id, Decimal("100.00"), Decimal("10.00"), Decimal("5.00"), Decimal("115.00"),
        f"Order {args.order_id}", "Demo", items,
    )
    print_stage("TOKEN PATH: mobile payment order", order)
    print_stage("TOKEN PATH: status before payment", connector.verify_mobile_payment_status(args.order_id))

    callback = gateway.simulate_payment(args.order_id)
    print_stage("TOKEN PATH: callback received", callback)

    code = connector.confirm_transaction(order.token, callback.transaction_id)
    print_stage("TOKEN PATH: confirm result code", code)
    print_stage("TOKEN PATH: status after confirm", connector.verify_mobile_payment_status(args.order_id))
    print_stage("TOKEN PATH: cancel attempt", connector.cancel_transaction(order.token, callback.transaction_id))

    # --- Code path ---
    code_order_id = f"{args.order_id}-CODE"
    payment_code = connector.issue_payment_code(
        code_order_id, "100.00", "10.00", "5.00", "115.00", f"Order {code_order_id}", "", items,
        payer="Ama Mensah", mobile=args.mobile, provider=args.provider,
        provider_type=ProviderType.MOBILE_MONEY.value,
    )
    print_stage("CODE PATH: payment code", payment_code)
    status = connector.check_payment_status(code_order_id, args.provider, ProviderType.MOBILE_MONEY.value)
    print_stage("CODE PATH: status before payment", status)

    gateway.simulate_payment(code_order_id)
    status = connector.check_payment_status(code_order_id, args.provider, ProviderType.MOBILE_MONEY.value)
    print_stage("CODE PATH: status after payment", status)


if __name__ == "__main__":
    main()
