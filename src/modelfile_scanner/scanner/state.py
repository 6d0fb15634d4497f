from enum import Enum


class ScanState(str, Enum):
    NAME = "name"
    PARAMETER_KEY = "parameter"
    MESSAGE_ROLE = "message"
    VALUE = "value"
    QUOTED_VALUE = "multiline"
    COMMENT = "comment"
