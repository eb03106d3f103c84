"""Test fixture package for the gateway.

Contains fixtures for:
- Mocked chain client and resolver
- Application and HTTP clients
"""
