"""
Claimdesk - insurance brokerage rating and claim adjudication core.

Premium rating, claim admissibility checks, plan/coverage resolution,
the claim lifecycle and customer-facing status readouts.
"""

__version__ = "1.0.0"
