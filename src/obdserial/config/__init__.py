"""
Layered configuration for the connector, built on ConfigObj: packaged defaults and platform
flavors, a user override and a local file, validated against a packaged schema.
"""
