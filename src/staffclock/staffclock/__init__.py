"""StaffClock package.

Feature modules (attendance, geolocation, users, reports) with a thin Flask
controller layer over service/repository layers.
"""

__version__ = "1.0.0"
