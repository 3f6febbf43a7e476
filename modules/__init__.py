"""GeoJoin Processing Modules

This package contains the processing modules of the GeoJoin system. Each
module builds on the shared framework in ``geojoin`` (configuration,
exceptions, logging and the geometry capability interface).
"""
