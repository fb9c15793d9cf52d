from gold.utils.price_feed import request_gold_price_quote
from gold.utils.quantity import compute_amount, to_amount, to_quantity

__all__ = [
    "request_gold_price_quote",
    "compute_amount",
    "to_amount",
    "to_quantity",
]
