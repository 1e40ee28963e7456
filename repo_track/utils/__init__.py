from repo_track.utils.data_processor import save_json, load_json, save_lifespans_json, save_lifespan_csv

__all__ = [
    "save_json",
    "load_json",
    "save_lifespans_json",
    "save_lifespan_csv",
]
