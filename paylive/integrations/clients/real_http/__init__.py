"""
Real HTTP integration clients.

These clients talk to the PayLIVE payment service over SOAP/HTTP.

Important:
- Must implement the same PaymentGateway interface as the mock clients
- Must return data shaped according to paylive/integrations/contracts/*

Switching:
The gateway is chosen when the PayliveConnector is constructed; pass a mock
gateway explicitly for development and tests.
"""
