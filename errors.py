"""Error taxonomy shared by the workout model, store and persistence layers."""


class WorkoutError(Exception):
    """Base class for workout tracker errors."""


class ValidationError(WorkoutError, ValueError):
    """Bad user input. Reported to the user; no state is mutated."""


class DuplicateIdError(WorkoutError, KeyError):
    """An activity id is already present in the store."""

    def __str__(self):
        return f"Duplicate activity id: {self.args[0]}" if self.args else "Duplicate activity id"


class CorruptRecordError(WorkoutError):
    """A persisted record could not be turned back into an activity."""


class GeolocationError(WorkoutError):
    """The browser could not deliver the user's position."""


class StorageError(WorkoutError):
    """The blob store could not read or write."""
