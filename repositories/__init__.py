"""
Query and persistence helpers around the models.

Repository functions add, flush and delete through ``db.session`` but never
commit; services wrap them in ``unit_of_work`` so that a primary action, its
audit log entry and its statistics update land in the same transaction.
"""
