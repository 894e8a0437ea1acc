"""
Auth package for the tinylink API.

Guards the management endpoints with a shared access key embedded in the
request path (`/k<access_key>/lnk`).
"""
