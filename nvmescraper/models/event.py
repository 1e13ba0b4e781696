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
import datetime
import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from nvmescraper.enums import EventPriority


class Event(BaseModel):
    """Something worth reporting that happened during a poll"""

    timestamp: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.timezone.utc)
    )
    reporter: str = "NVME_SCRAPER"
    category: str
    description: str
    data: dict = Field(default_factory=dict)
    priority: EventPriority
    device: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def validate_category(cls, category: str | Enum) -> str:
        """ensure category is has consistent formatting
        Args:
            category (str | Enum): category string
        Returns:
            str: formatted category string
        """
        if isinstance(category, Enum):
            category = category.value

        category = category.strip().upper()
        category = re.sub(r"[\s-]", "_", category)
        return category

    @field_validator("priority", mode="before")
    @classmethod
    def validate_priority(cls, priority: str | EventPriority) -> EventPriority:
        """Allow priority to be set via string priority name
        Args:
            priority (str | EventPriority): event priority string or enum
        Raises:
            ValueError: if priority string is an invalid value
        Returns:
            EventPriority: priority enum
        """

        if isinstance(priority, str):
            try:
                return getattr(EventPriority, priority.upper())
            except AttributeError as e:
                raise ValueError(
                    f"priority must be one of {[priority_enum.name for priority_enum in EventPriority]}"
                ) from e

        return priority

    @field_serializer("priority")
    def serialize_priority(self, priority: EventPriority, _info) -> str:
        return priority.name
