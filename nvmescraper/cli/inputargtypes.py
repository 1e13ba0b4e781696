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
import argparse
import json
import types
from typing import Generic, Type, TypeVar

from pydantic import BaseModel, ValidationError

TModelType = TypeVar("TModelType", bound=BaseModel)


def log_path_arg(log_path: str) -> str | None:
    """Type function for a log path arg, allows 'none' to be specified to disable logging

    Args:
        log_path (str): log path string

    Returns:
        str | None: log path or None
    """
    if log_path.lower() == "none":
        return None
    return log_path


def port_arg(str_input: str) -> int:
    """Type function for a TCP port

    Args:
        str_input (str): input string

    Raises:
        argparse.ArgumentTypeError: if input is not a valid port number

    Returns:
        int: port number
    """
    try:
        port = int(str_input)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"Invalid port: {str_input}") from e
    if not 0 < port < 65536:
        raise argparse.ArgumentTypeError(f"Port out of range: {port}")
    return port


def json_arg(json_path: str) -> dict:
    """loads a json file into a dict

    Args:
        json_path (str): path to json file

    Raises:
        argparse.ArgumentTypeError: If file does not exist or could not be decoded

    Returns:
        dict: output dict
    """
    try:
        with open(json_path, "r", encoding="utf-8") as input_file:
            data = json.load(input_file)
        return data
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"File {json_path} contains invalid JSON") from e
    except FileNotFoundError as e:
        raise argparse.ArgumentTypeError(f"Unable to find file: {json_path}") from e


class ModelArgHandler(Generic[TModelType]):
    """Class to handle loading json files into pydantic models"""

    def __init__(self, model: Type[TModelType]) -> types.NoneType:
        self.model = model

    def process_file_arg(self, file_path: str) -> TModelType:
        """load a json file into a pydantic model

        Args:
            file_path (str): json file path

        Raises:
            argparse.ArgumentTypeError: If validation errors were seen when building model

        Returns:
            TModelType: model instance
        """
        data = json_arg(file_path)
        try:
            return self.model(**data)
        except ValidationError as e:
            raise argparse.ArgumentTypeError(
                f"Validation errors when processing {file_path}: {e.errors()}"
            ) from e
