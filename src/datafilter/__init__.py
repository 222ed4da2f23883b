"""
datafilter – record-level access control for clinical data.

Import path convention::

    from datafilter.kernel.security import Principal, SecurityContext
    from datafilter.access import AccessResolver, FilterRegistry
    from datafilter.adapters.sqlalchemy import ClinicalSchema, DataFilter
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
