from .envelope import Envelope
from .parser import parse_frame
from .code import EXECUTE_CODE_COMMAND, wrap_code
from .builder import build_join, build_command

__all__ = ["EXECUTE_CODE_COMMAND", "Envelope", "build_command", "build_join", "parse_frame", "wrap_code"]
