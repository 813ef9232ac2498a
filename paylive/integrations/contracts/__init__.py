"""
Contracts (data models).

This folder defines the request/response shapes for the PayLIVE integration:
- the payment header and order payloads sent to the gateway
- token, code and status responses coming back
- the order lifecycle and result codes

Both the mock gateway and the SOAP gateway use these contracts, so the
connector never depends on which one is wired in.
"""
