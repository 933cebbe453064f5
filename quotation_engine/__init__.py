"""
Quotation Engine

Detects biblical quotations in historical newspapers: word counts over
newspaper batches, features of potential quotations, and classifiers that
separate genuine quotations from coincidental overlaps.
"""

__version__ = "0.1.0"
