"""
Mock integration clients.

These clients return realistic responses without calling PayLIVE.
They are used when:
- merchant credentials for the live or sandbox service are not available
- we want to run the full order lifecycle in tests without a network

Important:
- Mock clients must follow the SAME PaymentGateway interface as the real client.
- Mock clients return data shaped according to paylive/integrations/contracts/*
"""
