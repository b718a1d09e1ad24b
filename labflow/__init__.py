"""
labflow - clinical lab sample quality pipeline.

Ingests batches of sample records, runs them through a quality gate,
categorizes the valid ones, simulates downstream acknowledgments and keeps
a checksum-stamped audit trail of every stage.
"""

__version__ = "0.1.0"
