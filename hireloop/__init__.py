"""
HireLoop - Multi-Round Candidate Screening Engine

Runs candidates through a five-round assessment pipeline with a one-time
project authenticity gate, plus an adaptive conversational interview, and
produces hiring verdicts and reports.
"""

__version__ = "0.1.0"
__author__ = "HireLoop Team"
