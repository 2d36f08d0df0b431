"""
Payments app for Ingenico hosted checkout.

This app handles:
- Gateway configuration (PaymentGateway, managed in admin)
- Starting a hosted checkout and redirecting the shopper
- Validating the shopper's return against the processor
- Recording completed payments

Related apps:
    - orders: Order being paid, holds the checkout session

Usage:
    from payments.services import CheckoutInitiator, ReturnParams, ReturnValidator

    target = CheckoutInitiator.initiate(order, gateway, return_url)

    payment = ReturnValidator.validate(
        order, gateway, ReturnParams.from_query(request.query_params)
    )
"""
