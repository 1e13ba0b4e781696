###############################################################################
#
# MIT License
#
# Copyright (c) 2025 Advanced Micro Devices, Inc.
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.
#
###############################################################################
import json
import traceback
from enum import Enum
from typing import Any

from nvmescraper.exceptions import InvalidJsonError


class AutoNameStrEnum(Enum):
    """For enums where the value is the same as the name of the attribute"""

    @staticmethod
    def _generate_next_value_(name, start, count, last_values):
        """Name is the attributes name and the return will be its value"""
        return name


def get_exception_traceback(exception: Exception) -> dict:
    """get traceback and exception type from an exception

    Args:
        exception (Exception): exception

    Returns:
        dict: exception details dict
    """
    return {
        "exception_type": type(exception).__name__,
        "traceback": traceback.format_tb(exception.__traceback__),
    }


def get_exception_details(exception: Exception) -> dict:
    """get exception as a string and format in dictionary for event

    Args:
        exception (Exception): exception

    Returns:
        dict: exception details dict
    """
    return {
        "details": str(exception)[:1000],
    }


def load_json(raw_json: str, source: str) -> Any:
    """Decode the JSON output of a command

    Args:
        raw_json (str): raw text
        source (str): name of the command or document, used in the error message

    Raises:
        InvalidJsonError: if the text is not valid JSON

    Returns:
        Any: decoded document
    """
    try:
        return json.loads(raw_json)
    except (json.JSONDecodeError, TypeError) as e:
        raise InvalidJsonError(f"{source} output is not valid JSON: {e}") from e


def get_list(node: Any, key: str) -> list:
    """Return node[key] if node is a dict and the value is a list, else an empty list"""
    if isinstance(node, dict):
        value = node.get(key)
        if isinstance(value, list):
            return value
    return []


def to_float(value: Any) -> float:
    """Convert a JSON leaf to a float, missing or non numeric values read as 0

    Args:
        value (Any): JSON value

    Returns:
        float: numeric value
    """
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip().replace(",", ""))
        except ValueError:
            return 0.0
    return 0.0


def to_int(value: Any) -> int:
    """Convert a JSON leaf to an int, missing or non numeric values read as 0

    Args:
        value (Any): JSON value

    Returns:
        int: integer value
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip().replace(",", ""))
        except ValueError:
            return int(to_float(value))
    return 0
