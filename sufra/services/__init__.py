"""Domain services.

Services own business rules and transactions; routes only translate HTTP to service
calls.
"""
