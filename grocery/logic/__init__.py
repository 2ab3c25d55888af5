"""Core business logic layer.

Subpackages:
- sync: live views materialized from store subscriptions, snapshot channels
- mutations: validated fire-and-forget writes
- photos: the photo-attach workflow
- recipes: ingredient classification and formatting
- stores: nearby grocery store lookup
"""
__all__ = ["sync", "mutations", "photos", "recipes", "stores"]
