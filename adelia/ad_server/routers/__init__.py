"""
Adelia API Routers.

Modules:
    creatives – Kind listing, preview, build, records and stats
    health    – Health check
    serve     – Universal tag and placement lookup
    track     – Tracking pixel and JSON beacons
"""
