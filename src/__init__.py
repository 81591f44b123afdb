"""
Catalog Services - Source Package

Lambda entry points (one directory per function) and the shared ``service``
package with handlers, business logic and data access for the product,
category, deal, image, user and health APIs.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
]
