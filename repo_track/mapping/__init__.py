from repo_track.mapping.mappable import Mappable, BasicMappable
from repo_track.mapping.translator import translate_range
from repo_track.mapping.mapping import Mapping, MappingResult

__all__ = [
    "Mappable",
    "BasicMappable",
    "translate_range",
    "Mapping",
    "MappingResult",
]
