"""
Workout Map
"""

# Standard library imports
import asyncio
import logging

# Third-party imports
from nicegui import Client, ui

# Local imports
from constants import DEFAULT_DB_PATH, MAP_ZOOM_LEVEL
from core.controller import WorkoutController
from core.data_manager import DataManager
from db import BlobDatabase
from errors import GeolocationError
from components.leaflet_map import LeafletMapService
from components.workout_form import WorkoutForm
from components.workout_list import WorkoutList


logger = logging.getLogger(__name__)


class MuteFrameworkNoise(logging.Filter):
    def filter(self, record):
        # Filter out the specific NiceGUI warning about event listeners
        return "Event listeners changed after initial definition" not in record.getMessage()


GEOLOCATION_TIMEOUT_SEC = 20.0

# Resolves to {lat, lng} or {error}; never rejects.
GEOLOCATION_JS = '''
new Promise((resolve) => {
  if (!navigator.geolocation) {
    resolve({error: 'Geolocation is not supported by this browser'});
    return;
  }
  navigator.geolocation.getCurrentPosition(
    (position) => resolve({lat: position.coords.latitude, lng: position.coords.longitude}),
    (error) => resolve({error: error.message || 'Position unavailable'}),
  );
})
'''


# --- MAIN APPLICATION CLASS ---
class WorkoutMapApp:
    """One page session: sidebar with form and list, map on the right."""

    def __init__(self, db=None, zoom_level=MAP_ZOOM_LEVEL):
        self.db = db or BlobDatabase(DEFAULT_DB_PATH)
        self.zoom_level = zoom_level

        # ── UI widget handles ────────────────────────────────────────────
        self.map_container = None
        self.summary_label = None

        self.form = WorkoutForm(callbacks={
            'on_submit': self.handle_submit,
            'on_type_changed': lambda kind: self.controller.on_type_changed(kind),
            'on_cancel': lambda: self.controller.on_cancel(),
        })
        self.workout_list = WorkoutList(callbacks={
            'on_row_click': self.handle_row_click,
        })

        self.build_ui()

        self.controller = WorkoutController(
            map_service=LeafletMapService(self.map_container),
            blob_store=self.db,
            form=self.form,
            list_view=self.workout_list,
            notify=self.notify,
            zoom_level=self.zoom_level,
        )
        self.data_manager = DataManager(self.controller.store)

        # Phase one: rows render before the map exists.
        self.controller.load_session()
        self.refresh_summary()

    def build_ui(self):
        ui.add_head_html('''
        <style>
        .workout-marker { font-size: 24px; line-height: 32px; text-align: center; }
        .running-popup .leaflet-popup-content-wrapper { border-left: 5px solid #00c46a; }
        .cycling-popup .leaflet-popup-content-wrapper { border-left: 5px solid #ffb545; }
        .leaflet-seam-fix, .leaflet-seam-fix .leaflet-container { background: #18181b; }
        </style>
        ''')

        with ui.row().classes('w-full h-screen m-0 p-0 gap-0 no-wrap overflow-hidden'):
            with ui.column().classes('w-96 bg-zinc-900 p-4 h-screen flex-shrink-0 gap-4'):
                ui.label('🗺️ Workout Map').classes('text-2xl font-black tracking-tight text-white')
                self.form.build()
                with ui.scroll_area().classes('w-full flex-1'):
                    self.workout_list.build()

                self.summary_label = ui.label('').classes('text-xs text-zinc-400 font-mono')
                with ui.row().classes('w-full gap-2 no-wrap'):
                    ui.button('DELETE ALL', icon='delete_sweep', on_click=self.handle_clear_all).classes(
                        'flex-1 bg-zinc-800 text-white hover:bg-zinc-700'
                    ).props('flat')
                    ui.button('EXPORT CSV', icon='download', on_click=self.export_csv).classes(
                        'flex-1 bg-zinc-800 text-white hover:bg-zinc-700'
                    ).props('flat')

            self.map_container = ui.element('div').classes('flex-1 h-screen relative')
            with self.map_container:
                ui.label('Locating you…').classes('absolute inset-0 m-auto h-6 text-center text-zinc-500')

    def notify(self, message, level='info'):
        ui.notify(message, type=level, position='top')

    def refresh_summary(self):
        summary = self.data_manager.summarize()
        parts = []
        for kind, totals in summary.items():
            if totals['count']:
                parts.append(
                    f"{kind}: {totals['count']} · {totals['distance_km']:.1f} km · "
                    f"{totals['duration_min']:.0f} min"
                )
        self.summary_label.set_text(' | '.join(parts) or 'No workouts yet. Click the map to log one.')

    # --- Event handlers -----------------------------------------------------

    def handle_submit(self, field_values):
        if self.controller.on_submit(field_values) is not None:
            self.refresh_summary()

    def handle_row_click(self, row_id, target):
        self.controller.on_row_clicked(row_id, target)
        self.refresh_summary()

    def handle_clear_all(self):
        self.controller.clear_all()
        self.refresh_summary()

    def export_csv(self):
        try:
            path = self.data_manager.export_csv()
        except ValueError as ex:
            ui.notify(str(ex), type='warning')
            return
        except OSError as ex:
            logger.warning("CSV export failed: %s", ex)
            ui.notify(f"Export failed: {ex}", type='negative')
            return
        ui.notify(f"Saved {path}", type='positive')

    async def locate_user(self):
        """Phase two: ask the browser for a position once, then build the map."""
        try:
            result = await ui.run_javascript(GEOLOCATION_JS, timeout=GEOLOCATION_TIMEOUT_SEC)
            if not isinstance(result, dict):
                raise GeolocationError('Position unavailable')
            if 'error' in result:
                raise GeolocationError(result['error'])
            location = (float(result['lat']), float(result['lng']))
        except (GeolocationError, TimeoutError, asyncio.TimeoutError, KeyError, TypeError, ValueError) as ex:
            self.controller.on_position_error(ex)
            return
        self.controller.on_position(location)


@ui.page('/')
async def index(client: Client):
    workout_app = WorkoutMapApp()
    await client.connected()
    await workout_app.locate_user()


def main():
    """Application entry point."""
    # Suppress known NiceGUI framework listener-churn warning noise
    nicegui_logger = logging.getLogger('nicegui')
    nicegui_logger.addFilter(MuteFrameworkNoise())

    try:
        ui.run(
            title="Workout Map",
            reload=False,
            dark=True,
        )
    except KeyboardInterrupt:
        # Graceful terminal interrupt during local development.
        pass


if __name__ in {"__main__", "__mp_main__"}:
    main()
