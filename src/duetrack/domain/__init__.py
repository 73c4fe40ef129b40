"""Domain layer for duetrack application.

Services are imported from their own modules (e.g. ``duetrack.domain.debt``)
so that the database layer can import ``duetrack.domain.entities`` without a
circular import.
"""
