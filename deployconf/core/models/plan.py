"""
Unit plan models — declarative output of a provisioning unit.

A plan is data only: the resources a unit declares, the tags applied to
all of them, and the informational outputs reported back to the operator.
Values of the form ``${LogicalId.Attribute}`` are references the
provisioning framework fills in at deploy time.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class DeployTarget(BaseModel):
    """Account/region a unit is deployed into (either may be unknown)."""

    account: str | None = None
    region: str | None = None


class ResourceDecl(BaseModel):
    """One declared cloud resource."""

    logical_id: str
    type: str
    properties: dict[str, Any] = Field(default_factory=dict)


class UnitOutput(BaseModel):
    """An informational value emitted back to the operator."""

    name: str
    value: str
    description: str = ""
    export_name: str | None = None


class UnitPlan(BaseModel):
    """Everything one provisioning unit declares."""

    unit: str
    stack_id: str
    description: str = ""
    target: DeployTarget = Field(default_factory=DeployTarget)
    tags: dict[str, str] = Field(default_factory=dict)
    resources: list[ResourceDecl] = Field(default_factory=list)
    outputs: list[UnitOutput] = Field(default_factory=list)

    def get_resource(self, logical_id: str) -> ResourceDecl | None:
        """Look up a declared resource by logical id."""
        for res in self.resources:
            if res.logical_id == logical_id:
                return res
        return None

    def get_output(self, name: str) -> UnitOutput | None:
        """Look up an output by name."""
        for out in self.outputs:
            if out.name == name:
                return out
        return None
