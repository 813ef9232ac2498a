"""
Protocol services: header building, amount normalization, order issuance,
status checks and terminal transitions. Each call builds its own header.
"""
