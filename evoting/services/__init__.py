"""
Voting core: settings, voter registry, candidate tally, the vote casting
protocol and the reset/reconciliation maintenance operations.

Every function expects an application context and commits its own work.
"""
