"""
Pydantic schemas for event endpoints.

Events and the d3.js visual payloads (calendar, sunburst, tree) are all
shaped here.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field


# =============================================================================
# EVENTS
# =============================================================================


class EventResponse(BaseModel):
    """
    Event data returned from API.

    Example:
        {
            "id": 1,
            "timestamp": 1609459200,
            "severity": 2,
            "widget": "w-1",
            "gadget": "g-3",
            "sampler": "cpu",
            "message": "CPU above threshold"
        }
    """

    id: int
    timestamp: int
    severity: int
    widget: Optional[str]
    gadget: Optional[str]
    sampler: Optional[str]
    message: Optional[str]

    model_config = {"from_attributes": True}


# =============================================================================
# CALENDAR VISUAL
# =============================================================================


class CalendarRecord(BaseModel):
    """
    Number of events on one UTC calendar day.

    Example:
        {"date": "20210101", "value": 2}
    """

    date: str = Field(
        ...,
        pattern=r"^\d{8}$",
        description="Calendar day as YYYYMMDD (UTC)",
        examples=["20210101"],
    )
    value: int = Field(..., ge=0, description="Number of events on that day")


# =============================================================================
# HIERARCHY VISUALS (ZOOMABLE SUNBURST / COLLAPSIBLE TREE)
# =============================================================================


class HierarchyLeaf(BaseModel):
    """A sampler node carrying its event count."""

    name: str
    value: int = Field(..., ge=0)

    model_config = {"extra": "forbid"}


class HierarchyNode(BaseModel):
    """
    Root or internal node of a widget -> gadget -> sampler hierarchy.

    Example:
        {
            "name": "flare",
            "children": [
                {"name": "w-1", "children": [
                    {"name": "g-3", "children": [{"name": "cpu", "value": 4}]}
                ]}
            ]
        }
    """

    name: str
    # extra="forbid" on both models lets each child dict validate as exactly one of them
    children: list[Union[HierarchyLeaf, "HierarchyNode"]] = Field(default_factory=list)

    model_config = {"extra": "forbid"}


HierarchyNode.model_rebuild()
