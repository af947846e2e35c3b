"""Domain layer for khata application.

Services live in their own modules (``khata.domain.transaction`` and so on)
and are imported from there; this package stays import-free so the database
layer can depend on ``khata.domain.entities`` without a cycle.
"""
