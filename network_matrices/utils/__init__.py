"""
Utility functions for labelled result views.
"""

from .helpers import ptdf_to_frame, admittance_to_frame, incidence_to_frame, branch_table

__all__ = [
    'ptdf_to_frame',
    'admittance_to_frame',
    'incidence_to_frame',
    'branch_table',
]
