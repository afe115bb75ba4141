"""Patriot Thanks: directory of military and first responder discounts."""

__version__ = "1.0.0"
