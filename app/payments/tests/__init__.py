"""
Tests for the payments app.

Test modules:
- test_models.py: PaymentGateway, Payment and order balance
- test_checkout_initiator.py: CheckoutInitiator
- test_return_validator.py: ReturnValidator validation chain
- test_checkout_callbacks.py: notify and cancel handlers
- test_views.py: hosted checkout endpoints
- test_integration.py: full redirect and return journeys
"""
