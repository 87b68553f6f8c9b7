"""
Subscription Tracker - CRUD and cost aggregation for user subscriptions.

Layers, called in order:
- HTTP boundary (``subtracker.subscriptions.router``)
- Business rules (``subtracker.subscriptions.service``)
- Persistence (``subtracker.subscriptions.repository``)
"""

__version__ = "1.0.0"
