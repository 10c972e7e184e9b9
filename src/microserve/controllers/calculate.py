"""Integer arithmetic over query parameters."""

import re

from microserve.routing import RequestParam, get_mapping, rest_controller


INVALID_NUMBERS = "Error: Los parámetros deben ser números válidos"

_INTEGER = re.compile(r"[+-]?[0-9]+")


def parse_int(value: str) -> int:
    """Strict base-10 integer: no blanks, no decimals, no underscores."""
    if not _INTEGER.fullmatch(value):
        raise ValueError(f"not an integer: {value!r}")
    return int(value)


@rest_controller
class CalculateController:

    @get_mapping("/calculate/suma")
    @staticmethod
    def calculate(a=RequestParam("a", "0"), b=RequestParam("b", "0")):
        try:
            result = parse_int(a) + parse_int(b)
        except ValueError:
            return INVALID_NUMBERS
        return f"La suma de {a} + {b} = {result}"

    @get_mapping("/calculate/resta")
    @staticmethod
    def resta(a=RequestParam("a", "0"), b=RequestParam("b", "0")):
        try:
            result = parse_int(a) - parse_int(b)
        except ValueError:
            return INVALID_NUMBERS
        return f"La resta de {a} - {b} = {result}"
