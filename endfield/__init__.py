"""Manifest synthesis, route reconciliation and edge resolution for a kubernetes project canvas."""
__version__ = '0.1.0'
