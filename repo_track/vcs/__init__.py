from repo_track.vcs.file import VCSFile, InMemoryFile, DiskFile
from repo_track.vcs.change import LineChange, FileChange, DiffFileChange
from repo_track.vcs.revision import Commit, RevisionRange, merge_file_changes

__all__ = [
    "VCSFile",
    "InMemoryFile",
    "DiskFile",
    "LineChange",
    "FileChange",
    "DiffFileChange",
    "Commit",
    "RevisionRange",
    "merge_file_changes",
]
