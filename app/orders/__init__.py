"""
Orders app.

Holds the host Order entity that hosted checkouts are run against,
including the CheckoutSession correlation tokens written by the
payments app.

Related apps:
    - payments: Hosted checkout gateway and Payment records
"""
