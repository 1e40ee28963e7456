from .enum_types import FileChangeType, LineChangeType, MatchKind
from .errors import (
    RepoTrackError,
    InvalidArgumentError,
    IllegalStateError,
    BinaryFileError,
    check_argument,
    check_state,
)
