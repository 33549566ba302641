from enum import Enum

class BuildPhase(str, Enum):
    BUILD_START = "BUILD_START"
    BUILD_END = "BUILD_END"
    REGENERATE = "REGENERATE"
    WATCH = "WATCH"
    RESOLVE = "RESOLVE"
