from repo_track.tracking.entity import Entity, Location
from repo_track.tracking.lifespan import Lifespan
from repo_track.tracking.tracker import Tracker, TrackerState, contents_differ, track_step

__all__ = [
    "Entity",
    "Location",
    "Lifespan",
    "Tracker",
    "TrackerState",
    "contents_differ",
    "track_step",
]
