"""MediStock HTTP API package.

Routers live in their own modules (``medistock.api.products`` and so on).
The domain walks every module under ``medistock`` on ``init()``, so this
package imports none of them.
"""
