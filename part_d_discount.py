#!/usr/bin/env python3
"""
part_d_discount.py

Customer discount calculation.

    customer type   price <= 100   price > 100
    regular         0%             10%
    member          5%             15%
    vip             10%            20%
    anything else   0%             0%
"""

from __future__ import annotations
import argparse
import logging
from typing import List, Optional, Sequence

import numpy as np

# Configuration
DISCOUNT_THRESHOLD = 100.0

CUSTOMER_REGULAR = 0
CUSTOMER_MEMBER = 1
CUSTOMER_VIP = 2
CUSTOMER_UNKNOWN = 3

CUSTOMER_TYPES = {"regular": CUSTOMER_REGULAR, "member": CUSTOMER_MEMBER, "vip": CUSTOMER_VIP}

# rows: customer type, columns: [price <= threshold, price > threshold]
DISCOUNT_TABLE = np.array([
    [1.0, 0.9],
    [0.95, 0.85],
    [0.9, 0.8],
    [1.0, 1.0],
])

logger = logging.getLogger("Discount")


def parse_customer_type(customer_type: Optional[str]) -> int:
    """Exact, case-sensitive lookup; None and unknown names map to CUSTOMER_UNKNOWN."""
    if customer_type is None:
        return CUSTOMER_UNKNOWN
    return CUSTOMER_TYPES.get(customer_type, CUSTOMER_UNKNOWN)


def get_discounted_price(price: float, customer_type: Optional[str]) -> float:
    """Price after the customer's discount, via the rate table."""
    row = parse_customer_type(customer_type)
    col = 1 if price > DISCOUNT_THRESHOLD else 0
    return float(price * DISCOUNT_TABLE[row, col])


def get_discounted_price_v2(price: float, customer_type: Optional[str]) -> float:
    """Branching form of get_discounted_price; returns the same values."""
    over = price > DISCOUNT_THRESHOLD
    if customer_type == "regular":
        return price * 0.9 if over else price
    if customer_type == "member":
        return price * (0.85 if over else 0.95)
    if customer_type == "vip":
        return price * (0.8 if over else 0.9)
    return price


def apply_discounts(prices: Sequence[float], customer_types: Sequence[Optional[str]]) -> np.ndarray:
    """
    Discount a batch of prices.

    Args:
        prices: price per line.
        customer_types: customer type per line (same length as prices).

    Returns:
        numpy array of discounted prices.
    """
    prices_arr = np.asarray(prices, dtype=float)
    if prices_arr.shape != (len(customer_types),):
        raise ValueError("prices and customer_types must have the same length")
    rows = np.array([parse_customer_type(t) for t in customer_types], dtype=int)
    cols = (prices_arr > DISCOUNT_THRESHOLD).astype(int)
    return prices_arr * DISCOUNT_TABLE[rows, cols]


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    parser = argparse.ArgumentParser(description="Part D: customer discount calculation")
    parser.add_argument("price", type=float, help="Price before discount")
    parser.add_argument("customer_type", help="regular, member or vip")
    args = parser.parse_args(argv)

    if parse_customer_type(args.customer_type) == CUSTOMER_UNKNOWN:
        logger.warning("Unknown customer type %r: no discount applied", args.customer_type)
    final = get_discounted_price(args.price, args.customer_type)
    print(f"Original: {args.price:.2f}  Type: {args.customer_type}  Final: {final:.2f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
