import numpy as np
import pytest

from part_d_discount import apply_discounts, get_discounted_price, get_discounted_price_v2, main

CASES = [
    (150.0, "vip", 120.0),
    (80.0, "member", 76.0),
    (100.0, "regular", 100.0),
    (100.01, "regular", 90.009),
    (200.0, "member", 170.0),
    (50.0, "vip", 45.0),
    (150.0, "gold", 150.0),
    (150.0, "VIP", 150.0),
    (150.0, None, 150.0),
    (0.0, "vip", 0.0),
]


@pytest.mark.parametrize("price,customer_type,expected", CASES)
def test_discounted_price(price, customer_type, expected):
    assert get_discounted_price(price, customer_type) == pytest.approx(expected)
    assert get_discounted_price_v2(price, customer_type) == pytest.approx(expected)


def test_apply_discounts_matches_scalar_version():
    prices = [c[0] for c in CASES]
    types = [c[1] for c in CASES]
    result = apply_discounts(prices, types)
    assert isinstance(result, np.ndarray)
    np.testing.assert_allclose(result, [c[2] for c in CASES])


def test_apply_discounts_length_mismatch():
    with pytest.raises(ValueError):
        apply_discounts([1.0, 2.0], ["vip"])


def test_main(capsys):
    assert main(["150", "vip"]) == 0
    assert "Final: 120.00" in capsys.readouterr().out
