"""
MEKD - Model Estimasi Korupsi Daerah

Estimates regional corruption (Rp) and the human development index (IPM)
from regional fiscal and demographic indicators.
"""
__version__ = "1.0.0"
