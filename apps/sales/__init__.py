"""
Sales app for jewellery shop billing.

Order engine (sequential identifiers, server-side totals, stock
decrement) and return engine (one refund per order).
"""
