"""
MiFutbol Match Analytics

Descriptive and diagnostic statistics over a personal football match log:
aggregation, calendar bucketing, correlation, outlier detection, streaks
and efficiency ratios.
"""

__version__ = "0.1.0"
__author__ = "MiFutbol Team"
