"""
Deterministic calculation engine.

Pure Python math. Given a snapshot of an estimate's project details or a
project's zone/task tree, produce cost breakdowns and progress figures.
"""
