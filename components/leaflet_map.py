"""
components/leaflet_map.py
─────────────────────────
Map service backed by NiceGUI's Leaflet element.

Implements the contract MapSyncController consumes; the returned map
handle is the ``ui.leaflet`` element and marker handles are its Marker
layers. Builds into ``container`` so the map can be created after the page
(geolocation arrives asynchronously).
"""
from __future__ import annotations

import json
import logging

from nicegui import ui
from nicegui.elements.leaflet_layers import Marker

from constants import PAN_DURATION_SEC, POPUP_OPTIONS, TILE_ATTRIBUTION, TILE_URL_TEMPLATE


logger = logging.getLogger(__name__)


class LeafletMapService:
    """Opaque map widget: place/remove markers, set the view, report clicks."""

    def __init__(self, container):
        self.container = container

    def initialize(self, center, zoom):
        self.container.clear()
        with self.container:
            m = ui.leaflet(center=tuple(center), zoom=zoom, options={
                'attributionControl': True,
            }).classes('w-full h-full leaflet-seam-fix')
            m.clear_layers()
            m.tile_layer(
                url_template=TILE_URL_TEMPLATE,
                options={'attribution': TILE_ATTRIBUTION, 'maxZoom': 19},
            )
        return m

    def on_click(self, handle, callback):
        def _handle_click(e):
            latlng = (e.args or {}).get('latlng') or {}
            if 'lat' not in latlng or 'lng' not in latlng:
                logger.debug("Map click without coordinates: %s", e.args)
                return
            callback((latlng['lat'], latlng['lng']))

        handle.on('map-click', _handle_click)

    def add_marker(self, handle, location, content):
        marker = handle.marker(latlng=tuple(location))
        icon_js = (
            f'L.divIcon({{className:"workout-marker",'
            f'html:{json.dumps(content.icon)},'
            f'iconSize:[32,32],iconAnchor:[16,16],popupAnchor:[0,-14]}})'
        )
        marker.run_method(':setIcon', icon_js)
        marker.run_method('bindPopup', content.popup_html, {
            **POPUP_OPTIONS,
            'className': content.class_name,
        })
        marker.run_method('openPopup')
        return marker

    def remove_marker(self, handle, marker):
        if marker not in handle.layers:
            return
        handle.remove_layer(marker)

    def set_view(self, handle, location, zoom, animated=False):
        handle.run_map_method('setView', list(location), zoom, {
            'animate': animated,
            'pan': {'duration': PAN_DURATION_SEC},
        })

    def for_each_marker(self, handle, visitor):
        for layer in list(handle.layers):
            if isinstance(layer, Marker):
                visitor(layer)
