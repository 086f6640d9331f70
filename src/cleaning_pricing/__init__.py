"""
Cleaning Pricing Package

Dynamic service-pricing engine for a cleaning-services business.
Prices a service's configurable options (per-unit, selector, flexible
surcharges) against a customer's selections.
"""

__version__ = "1.0.0"
