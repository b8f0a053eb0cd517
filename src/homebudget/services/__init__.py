"""Budget computation services.

The engine modules (periods, income, taxonomy, recurrence, methodology,
splits, budgeting, annotate) are pure; ``snapshot`` and ``customizations``
talk to storage.
"""
