"""SeeTest Cloud device client.

A client library and command line tool for the SeeTest Cloud device-farm
REST API: query the device inventory, filter devices by attributes, and
manage reservations, tags and web-control sessions.
"""

__version__ = "1.0.0"
