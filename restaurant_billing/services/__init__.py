"""
                        Services Module

Contains the billing business logic and its menu dependency.

Services:
    - menu: price list sources (mock / HTTP) and the caching menu client
    - billing: delivery ledger, bill book, payments and payment options
"""
